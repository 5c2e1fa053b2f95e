# Routes package init
"""
Roster Backend: API Routes Package
====================================

Route Inventory:
    - students.py: GET    /api/v1/students              (list students)
                   POST   /api/v1/students              (register a student)
                   DELETE /api/v1/students/{student_id} (delete a student)
                   PUT    /api/v1/students/{student_id} (update name/email)
    - health.py:   GET    /health                       (service health check)

Routes stay thin: parse the request, call StudentService, shape the
response. Errors propagate to the handlers registered in roster.main.
"""
