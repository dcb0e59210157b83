"""BaseService transaction handling and operation metrics."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import NotFoundException, ServiceException
from app.services.base import BaseService


class _SampleService(BaseService):
    @BaseService.measure_operation("do_work")
    def do_work(self, value: int) -> int:
        return value * 2

    @BaseService.measure_operation("fail_work")
    def fail_work(self) -> None:
        raise NotFoundException("missing")


@pytest.fixture
def service():
    BaseService._class_metrics.pop("_SampleService", None)
    return _SampleService(MagicMock())


@pytest.mark.unit
class TestTransaction:
    def test_commits_on_success(self, service) -> None:
        with service.transaction():
            pass
        service.db.commit.assert_called_once()
        service.db.rollback.assert_not_called()

    def test_store_error_becomes_service_exception(self, service) -> None:
        with pytest.raises(ServiceException):
            with service.transaction():
                raise SQLAlchemyError("connection lost")
        service.db.rollback.assert_called_once()

    def test_domain_errors_propagate_unchanged(self, service) -> None:
        with pytest.raises(NotFoundException):
            with service.transaction():
                raise NotFoundException("gone")
        service.db.rollback.assert_called_once()
        service.db.commit.assert_not_called()


@pytest.mark.unit
class TestMeasureOperation:
    def test_records_success_and_failure(self, service) -> None:
        assert service.do_work(3) == 6
        assert service.do_work(4) == 8
        with pytest.raises(NotFoundException):
            service.fail_work()

        metrics = service.get_metrics()
        assert metrics["do_work"]["count"] == 2
        assert metrics["do_work"]["success_count"] == 2
        assert metrics["fail_work"]["failure_count"] == 1
        assert metrics["do_work"]["avg_time"] >= 0

    def test_preserves_function_name(self, service) -> None:
        assert service.do_work.__name__ == "do_work"
