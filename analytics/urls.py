"""
Analytics App URLs
"""

from django.urls import path

from . import views

urlpatterns = [
    # Historical clearance reports
    path('import-clearance/<str:year>/<int:month>/',
         views.import_clearance_all,
         name='import-clearance'),
    path('import-clearance/<str:year>/<int:month>/ie-code/<str:ie_code>/',
         views.import_clearance_by_ie_code,
         name='import-clearance-ie-code'),
    path('import-clearance/<str:year>/<int:month>/<str:importer>/',
         views.import_clearance_by_importer,
         name='import-clearance-importer'),

    # Operational dashboard
    path('date-validity/<str:year>/', views.date_validity, name='date-validity'),
    path('date-validity/<str:year>/<int:month>/', views.date_validity, name='date-validity-month'),
    path('event-timeline/<str:year>/', views.event_timeline, name='event-timeline'),
    path('status-distribution/<str:year>/', views.status_distribution, name='status-distribution'),

    # Cost analytics
    path('analytics/per-kg-cost/', views.per_kg_cost, name='per-kg-cost'),
    path('analytics/best-suppliers/', views.best_suppliers, name='best-suppliers'),
]
