"""School Records package.

Attendance and promotion eligibility for a school information system,
organized by feature modules (academics, attendance, grades, promotion,
certificates, ...) with a thin Flask JSON controller layer over
service/repository layers.
"""
