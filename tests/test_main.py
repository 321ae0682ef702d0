"""Tests for the run orchestration and command-line entry point."""
import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from patient_risk.main import build_parser, main, run_assessment
from patient_risk.models.schemas import AssessmentResultSet
from patient_risk.utils.errors import ConfigurationError, HttpStatusError
from tests.factories import make_patient, page_response


@pytest.mark.integration
class TestRunAssessment:
    """Tests for run_assessment against a fake API."""

    def test_fetch_analyze_submit(self, settings, make_api):
        """Test a full run: two pages fetched, results computed and submitted."""
        submitted = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/patients"):
                page = int(request.url.params["page"])
                if page == 1:
                    return page_response(
                        [
                            make_patient("DEMO002", blood_pressure="150/95", temperature=101.5, age=70),
                            make_patient("DEMO001"),
                        ],
                        total_pages=2,
                    )
                return page_response(
                    [
                        make_patient("DEMO003", blood_pressure="N/A", temperature=99.9, age=30),
                        make_patient(None, temperature=104),
                    ],
                    total_pages=2,
                )
            submitted.append(json.loads(request.content))
            return httpx.Response(200, json={"success": True})

        results, response = run_assessment(settings, api=make_api(handler))

        expected = {
            "high_risk_patients": ["DEMO002"],
            "fever_patients": ["DEMO002", "DEMO003"],
            "data_quality_issues": ["DEMO003"],
        }
        assert results.model_dump() == expected
        assert submitted == [expected]
        assert response == {"success": True}

    def test_no_submission_when_fetch_fails(self, settings):
        """Test that a fetch failure aborts the run before submission."""
        api = MagicMock()
        api.fetch_all_patients.side_effect = HttpStatusError(404, body="missing")

        with pytest.raises(HttpStatusError):
            run_assessment(settings, api=api)

        api.submit_assessment.assert_not_called()

    def test_owned_client_is_closed(self, settings):
        with patch("patient_risk.main.PatientsApiClient") as mock_client_cls:
            api = mock_client_cls.return_value
            api.fetch_all_patients.return_value = []
            api.submit_assessment.return_value = {"ok": True}

            results, response = run_assessment(settings)

        assert results == AssessmentResultSet()
        assert response == {"ok": True}
        api.close.assert_called_once()


@pytest.mark.unit
class TestMain:
    """Tests for the CLI main function."""

    def test_success_prints_payload_and_response(self, settings, capsys):
        results = AssessmentResultSet.from_ids(fever_patients=["P1"])
        with patch("patient_risk.main.setup_application", return_value=settings), \
             patch("patient_risk.main.run_assessment", return_value=(results, {"score": 100})):
            exit_code = main([])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "--- SUBMITTED PAYLOAD ---" in out
        assert '"fever_patients": [\n    "P1"\n  ]' in out
        assert "--- API RESPONSE ---" in out
        assert '"score": 100' in out

    def test_api_error_returns_failure(self, settings, capsys):
        with patch("patient_risk.main.setup_application", return_value=settings), \
             patch("patient_risk.main.run_assessment", side_effect=HttpStatusError(401, body="bad key")):
            exit_code = main([])

        assert exit_code == 1
        assert "SUBMITTED PAYLOAD" not in capsys.readouterr().out

    def test_unexpected_error_is_logged_and_returns_failure(self, settings, capsys):
        """Test that a non-application exception still ends in exit code 1."""
        with patch("patient_risk.main.setup_application", return_value=settings), \
             patch("patient_risk.main.run_assessment", side_effect=RuntimeError("boom")), \
             patch("patient_risk.main.logger") as mock_logger:
            exit_code = main([])

        assert exit_code == 1
        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args[1]["error_type"] == "RuntimeError"
        assert "SUBMITTED PAYLOAD" not in capsys.readouterr().out

    def test_configuration_error_returns_failure(self):
        with patch(
            "patient_risk.main.setup_application",
            side_effect=ConfigurationError("Invalid patient API configuration", details={"fields": ["API_KEY"]}),
        ), patch("patient_risk.main.configure_logging"), \
             patch("patient_risk.main.run_assessment") as mock_run:
            exit_code = main([])

        assert exit_code == 1
        mock_run.assert_not_called()

    def test_cli_options_forwarded_to_setup(self, settings):
        with patch("patient_risk.main.setup_application", return_value=settings) as mock_setup, \
             patch("patient_risk.main.run_assessment", return_value=(AssessmentResultSet(), {})):
            main(["--base-url", "https://other.test/api", "--log-level", "debug", "--log-format", "json"])

        mock_setup.assert_called_once_with(
            base_url="https://other.test/api",
            log_level="DEBUG",
            log_format="json",
        )

    def test_parser_defaults(self):
        args = build_parser().parse_args([])

        assert args.base_url is None
        assert args.log_level is None
        assert args.log_format is None
