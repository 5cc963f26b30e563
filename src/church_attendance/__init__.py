"""Church Attendance package.

Feature modules (members, attendance, stats, checkin) each carry their own
model/repository/service layers with a thin Flask controller on top.
"""
