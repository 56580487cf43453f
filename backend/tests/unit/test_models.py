"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from scan_control.models import (
    Geometry,
    Job,
    JobStatus,
    PageSize,
    ScanMode,
    Settings,
    StageKind,
)


@pytest.fixture
def temp_job() -> Job:
    return Job(job_id="test-job-id", timestamp="2026_10_19_09_30_00")


class TestSettings:
    """扫描设置测试"""

    def test_defaults(self):
        """测试默认值"""
        settings = Settings()
        assert settings.size == PageSize.LETTER
        assert settings.mode is None
        assert not settings.is_pdf
        assert not settings.is_jpg

    def test_predicates(self):
        """测试模式判定"""
        assert Settings(mode=ScanMode.PDF).is_pdf
        assert Settings(mode=ScanMode.JPG).is_jpg

    def test_immutable(self):
        """测试不可变"""
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.crop = True

    def test_summary(self):
        """测试摘要"""
        settings = Settings(size=PageSize.A4, mode=ScanMode.JPG, crop=True)
        assert settings.summary() == "size=a4 mode=jpg crop=True deskew=False"
        assert Settings().summary() == "size=letter mode=- crop=False deskew=False"


class TestGeometry:
    """幅面测试"""

    def test_as_args(self):
        """测试整数与小数格式"""
        assert Geometry(page_width=210, page_height=297, x=210, y=297).as_args() == [
            "--page-width", "210", "--page-height", "297", "-x", "210", "-y", "297",
        ]
        legal = Geometry(page_width=215.9, page_height=355.6, x=215.9, y=355.6)
        assert legal.as_args()[1] == "215.9"


class TestPlan:
    """计划测试"""

    def test_stage_lookup(self, planner):
        """测试阶段查找"""
        plan = planner.plan(Settings())
        assert plan.has(StageKind.ACQUIRE)
        assert plan.stage(StageKind.AGGREGATE) is None


class TestJob:
    """任务模型测试"""

    def test_mark_running(self, temp_job: Job):
        """测试标记运行中"""
        temp_job.mark_running("Acquire")
        assert temp_job.status == JobStatus.RUNNING
        assert temp_job.progress.stage == "Acquire"
        assert temp_job.started_at is not None

    def test_mark_succeeded(self, temp_job: Job):
        """测试标记成功"""
        temp_job.mark_running()
        temp_job.mark_succeeded()
        assert temp_job.status == JobStatus.SUCCEEDED
        assert temp_job.succeeded

    def test_mark_failed(self, temp_job: Job):
        """测试标记失败"""
        temp_job.mark_running()
        temp_job.progress.stage = "PerImageAdjust"
        temp_job.mark_failed("Test error")
        assert temp_job.status == JobStatus.FAILED
        assert temp_job.failed_stage == "PerImageAdjust"
        assert "Test error" in temp_job.errors
