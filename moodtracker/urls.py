from django.http import HttpResponse
from django.urls import path, include

def health(_request):
    return HttpResponse("ok")

urlpatterns = [
    path("healthz/", health, name="health"),
    path("", include("journal.urls")),
]
