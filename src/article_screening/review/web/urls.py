"""
URL configuration for the review web interface.
"""

from django.urls import path

from . import views

# Note: No app_name since this is the ROOT_URLCONF

urlpatterns = [
    # Login / reviewer selection
    path("", views.login_page, name="login"),
    path("logout/", views.logout, name="logout"),
    # Review queue
    path("review/", views.review_page, name="review"),
    path("review/decide/", views.decide, name="decide"),
    path("review/skip/", views.skip, name="skip"),
    path("review/previous/", views.previous, name="previous"),
    # Summary
    path("summary/", views.summary_page, name="summary"),
    path("summary/back/", views.summary_back, name="summary_back"),
]
