# debts/api/urls.py

from rest_framework.routers import SimpleRouter

from debts.api.views import DebtViewSet

router = SimpleRouter()
router.register(r"", DebtViewSet, basename="debts")

urlpatterns = router.urls
