from django.conf import settings
from django.contrib import admin
from django.urls import include, path

from blog.views import AllPostsView

# Everything under admin/ sits behind AdminBasicAuthMiddleware
urlpatterns = [
    path('', AllPostsView.as_view(), name='home'),
    path('blog/', include('blog.urls')),
    path('api/', include('api.urls')),
    # Post editor; the admin site needs its own top-level namespace
    path('admin/site/', admin.site.urls),
    path('admin/', include('backoffice.urls')),
]

if 'debug_toolbar' in settings.INSTALLED_APPS:
    urlpatterns.append(path('__debug__/', include('debug_toolbar.urls')))
