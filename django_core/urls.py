from django.urls import path, include

urlpatterns = [
    path('api/git/', include('upload_app.urls', namespace='upload_app_')),
]
