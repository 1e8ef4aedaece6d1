"""Tests for FIR and filter schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from firdesk.schemas.filters import FilterCriteria
from firdesk.schemas.fir import FIRRecord, FIRStatus, Priority


class TestFIRRecord:
    def test_parse_service_json(self):
        """Test parsing the camelCase JSON returned by the service."""
        record = FIRRecord.model_validate(
            {
                "id": 4,
                "firNumber": "FIR-2026-0004",
                "complainantName": "Asha Rao",
                "incidentType": "Burglary",
                "description": "Break-in at shop",
                "dateTime": "2026-10-18T22:15:00",
                "priority": "HIGH",
                "status": "PENDING",
                "actionNotes": ["Called complainant"],
                "createdAt": "2026-10-18T23:00:00",
                "updatedAt": "2026-10-18T23:00:00",
                "history": [
                    {"id": 1, "action": "CREATED", "officerName": "System", "timestamp": "2026-10-18T23:00:00"}
                ],
            }
        )
        assert record.fir_number == "FIR-2026-0004"
        assert record.priority == Priority.HIGH
        assert record.action_notes == ["Called complainant"]
        assert record.history[0].officer_name == "System"
        assert record.evidence_files == []

    def test_record_is_immutable(self):
        record = FIRRecord(
            id=1,
            fir_number="FIR-2026-0001",
            complainant_name="A",
            incident_type="Theft",
            date_time="2026-10-18T10:00:00",
            created_at="2026-10-18T10:00:00",
        )
        with pytest.raises(ValidationError):
            record.status = FIRStatus.CLOSED

    def test_priority_order(self):
        ranks = [p.rank for p in (Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.EMERGENCY)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_status_label(self):
        assert FIRStatus.UNDER_INVESTIGATION.label == "Under Investigation"


class TestFilterCriteria:
    def test_value_equality(self):
        """Test snapshots compare by value."""
        a = FilterCriteria(search="theft", status="PENDING")
        b = FilterCriteria(search="theft", status=FIRStatus.PENDING)
        assert a == b
        assert a != a.with_changes(search="thef")

    def test_all_sentinel_is_no_filter(self):
        criteria = FilterCriteria(status="ALL", priority="", incident_type="all")
        assert criteria.status is None
        assert criteria.priority is None
        assert criteria.incident_type is None

    def test_selectors_case_insensitive(self):
        criteria = FilterCriteria(status="pending", priority="high")
        assert criteria.status == FIRStatus.PENDING
        assert criteria.priority == Priority.HIGH

    def test_invalid_page_size(self):
        with pytest.raises(ValidationError):
            FilterCriteria(page_size=0)

    def test_query_params(self):
        criteria = FilterCriteria(
            search="  knife ",
            complainant="rao",
            status="UNDER_INVESTIGATION",
            priority="EMERGENCY",
            incident_type="Assault",
            date_filter=date(2026, 10, 18),
            page_size=10,
        )
        assert criteria.to_query_params(2) == {
            "page": 2,
            "size": 10,
            "search": "knife",
            "complainant": "rao",
            "status": "UNDER_INVESTIGATION",
            "priority": "EMERGENCY",
            "incidentType": "Assault",
            "dateFilter": "2026-10-18",
        }

    def test_query_params_defaults(self):
        assert FilterCriteria().to_query_params(0) == {"page": 0, "size": 5}

    def test_with_changes_is_copy(self):
        base = FilterCriteria()
        changed = base.with_changes(status="CLOSED")
        assert base.status is None
        assert changed.status == FIRStatus.CLOSED
