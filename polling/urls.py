from rest_framework.routers import DefaultRouter

from .views import QuestionViewSet, SessionViewSet, UploadViewSet

router = DefaultRouter()
router.register(r"sessions", SessionViewSet, basename="session")
router.register(r"questions", QuestionViewSet, basename="question")
router.register(r"uploads", UploadViewSet, basename="upload")

urlpatterns = router.urls
