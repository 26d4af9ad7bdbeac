"""
Unit Tests for the Assessment Service
"""
from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException

from wellnessai.core.intake import AssessmentInput
from wellnessai.services.assessment import AssessmentService
from tests.conftest import make_profile


class TestReportRegistry:
    """Generated reports kept in memory for download."""

    def test_oldest_reports_evicted(self):
        service = AssessmentService(max_reports=2)
        service.create_patient(make_profile())
        start = datetime(2026, 3, 14, 9, 0, 0)
        ids = [
            service.run_assessment(AssessmentInput(), generated_at=start + timedelta(seconds=i))[1].report_id
            for i in range(3)
        ]

        with pytest.raises(HTTPException) as exc:
            service.get_report(ids[0])
        assert exc.value.status_code == 404
        assert service.get_report(ids[1])[1].report_id == ids[1]
        assert service.get_report(ids[2])[1].report_id == ids[2]

    def test_default_cap_matches_settings(self):
        from wellnessai import main
        from wellnessai.config import settings

        assert main._assessment_service.max_reports == settings.max_stored_reports
