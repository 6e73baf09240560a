from rest_framework.routers import DefaultRouter
from .views import CourseEnrollmentViewSet, EnrollmentViewSet

router = DefaultRouter()
# "" prefix 목록 라우트가 API root(^$)에 가려지지 않도록
router.include_root_view = False

router.register(
    r"course-enrollments",
    CourseEnrollmentViewSet,
    basename="course-enrollment",
)

router.register(
    r"",
    EnrollmentViewSet,
    basename="enrollment",
)

urlpatterns = router.urls
