"""URL configuration for the api app."""

from django.urls import path

from . import views

app_name = 'api'

urlpatterns = [
    # All posts, drafts included unless BLOG_API_INCLUDE_UNPUBLISHED is off
    path('posts', views.PostListView.as_view(), name='post_list'),
    path('posts/', views.PostListView.as_view()),
    path('posts.json', views.PostListView.as_view()),
    # Empty post scaffold; must come before the <int:pk> routes
    path('posts/new', views.NewPostView.as_view(), name='post_new'),
    path('posts/new/', views.NewPostView.as_view()),
    path('posts/<int:pk>', views.PostDetailView.as_view(), name='post_detail'),
    path('posts/<int:pk>/', views.PostDetailView.as_view()),
    path('posts/<int:pk>.json', views.PostDetailView.as_view()),
]
