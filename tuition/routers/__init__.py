from tuition.routers import ai_help, attendance, dashboard, fees, remarks, students

__all__ = [
    'ai_help',
    'attendance',
    'dashboard',
    'fees',
    'remarks',
    'students',
]
