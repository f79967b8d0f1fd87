import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for path in (PROJECT_ROOT, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from analysis_fakes import (  # noqa: E402
    SAMPLE_REPORT_TEXT,
    RecordingSleep,
    ScriptedTransport,
    build_orchestrator,
    envelope_for,
    make_text_pdf,
)
from app.ai.http_client import RetryPolicy  # noqa: E402
from app.core.errors import (  # noqa: E402
    CorruptDocumentError,
    InvalidInputError,
    SchemaViolationError,
    TransportError,
)
from app.schemas.analysis import MAX_TEXT_CHARS, AnalysisReport, AnalysisRequest  # noqa: E402


def _report_json(**overrides) -> str:
    data = json.loads(SAMPLE_REPORT_TEXT)
    data.update(overrides)
    return json.dumps(data)


class AnalysisOrchestratorTests(unittest.IsolatedAsyncioTestCase):
    async def _analyze(self, transport, request, **kwargs):
        orchestrator, http_client = build_orchestrator(transport, **kwargs)
        async with http_client:
            return await orchestrator.analyze(request)

    async def test_empty_resume_fails_without_network_call(self):
        for resume_text in ("", "   \n\t"):
            with self.subTest(resume_text=resume_text):
                transport = ScriptedTransport([envelope_for(SAMPLE_REPORT_TEXT)])
                with self.assertRaises(InvalidInputError):
                    await self._analyze(transport, AnalysisRequest(resume_text=resume_text))
                self.assertEqual(transport.calls, 0)

    async def test_well_formed_envelope_returns_report(self):
        transport = ScriptedTransport([envelope_for(SAMPLE_REPORT_TEXT)])
        report = await self._analyze(
            transport,
            AnalysisRequest(resume_text="Jane Doe\nPython", job_description="Backend engineer"),
        )

        self.assertEqual(report.ats_score, 72)
        self.assertEqual(report.strengths, ["clear layout"])
        self.assertEqual(report.summary, "ok")
        self.assertEqual(report.job_description_match, [])

        prompt = transport.request_json()["contents"][0]["parts"][0]["text"]
        self.assertIn("Jane Doe\nPython", prompt)
        self.assertIn("Backend engineer", prompt)

    async def test_missing_candidates_is_schema_violation_without_retry(self):
        sleep = RecordingSleep()
        transport = ScriptedTransport([{"promptFeedback": {}}, envelope_for(SAMPLE_REPORT_TEXT)])
        with self.assertRaises(SchemaViolationError):
            await self._analyze(transport, AnalysisRequest(resume_text="Jane"), sleep=sleep)
        self.assertEqual(transport.calls, 1)
        self.assertEqual(sleep.delays, [])

    async def test_invalid_report_payloads_are_rejected(self):
        cases = {
            "not json": "this is not json",
            "truncated": SAMPLE_REPORT_TEXT[:-10],
            "score too high": _report_json(atsScore=120),
            "negative score": _report_json(atsScore=-1),
            "score as string": _report_json(atsScore="72"),
            "strengths not list": _report_json(strengths="clear layout"),
            "non string item": _report_json(weaknesses=[1, 2]),
            "missing field": json.dumps({"atsScore": 50, "summary": "ok"}),
            "top level list": "[]",
        }
        for label, inner_text in cases.items():
            with self.subTest(label):
                transport = ScriptedTransport([envelope_for(inner_text)])
                with self.assertRaises(SchemaViolationError):
                    await self._analyze(transport, AnalysisRequest(resume_text="Jane"))
                self.assertEqual(transport.calls, 1)

    async def test_transport_failure_surfaces_after_retries(self):
        sleep = RecordingSleep()
        transport = ScriptedTransport([502], repeat_last=True)
        with self.assertRaises(TransportError):
            await self._analyze(
                transport,
                AnalysisRequest(resume_text="Jane"),
                sleep=sleep,
                policy=RetryPolicy(max_retries=2, initial_delay_s=0.25),
            )
        self.assertEqual(transport.calls, 3)
        self.assertEqual(sleep.delays, [0.25, 0.5])

    async def test_analyze_document_extracts_pdf_text_first(self):
        transport = ScriptedTransport([envelope_for(SAMPLE_REPORT_TEXT)])
        orchestrator, http_client = build_orchestrator(transport)
        async with http_client:
            report = await orchestrator.analyze_document(
                make_text_pdf(["Jane Doe Python Engineer"]), job_description="Data role"
            )

        self.assertEqual(report.ats_score, 72)
        prompt = transport.request_json()["contents"][0]["parts"][0]["text"]
        self.assertIn("Jane Doe Python Engineer", prompt)
        self.assertIn("Data role", prompt)

    async def test_analyze_document_rejects_non_pdf(self):
        transport = ScriptedTransport([envelope_for(SAMPLE_REPORT_TEXT)])
        orchestrator, http_client = build_orchestrator(transport)
        async with http_client:
            with self.assertRaises(CorruptDocumentError):
                await orchestrator.analyze_document(b"plain text resume")
        self.assertEqual(transport.calls, 0)

    async def test_analyze_document_rejects_overlong_job_description(self):
        transport = ScriptedTransport([envelope_for(SAMPLE_REPORT_TEXT)])
        orchestrator, http_client = build_orchestrator(transport)
        async with http_client:
            with self.assertRaises(InvalidInputError):
                await orchestrator.analyze_document(
                    make_text_pdf(["Jane Doe Python Engineer"]),
                    job_description="x" * (MAX_TEXT_CHARS + 1),
                )
        self.assertEqual(transport.calls, 0)


class AnalysisReportTests(unittest.TestCase):
    def test_round_trip_through_inner_json(self):
        report = AnalysisReport(
            ats_score=88.5,
            summary="Strong backend profile",
            ats_feedback=["Use standard headings"],
            strengths=["Quantified impact", "Clear layout"],
            weaknesses=["No summary section"],
            job_description_match=["Mentions Python and SQL"],
        )
        encoded = report.to_inner_json()
        self.assertIn('"atsScore":88.5', encoded)
        self.assertIn('"jobDescriptionMatch"', encoded)
        self.assertEqual(AnalysisReport.from_inner_json(encoded), report)

    def test_unknown_fields_are_ignored(self):
        report = AnalysisReport.from_inner_json(_report_json(extra="ignored"))
        self.assertEqual(report.ats_score, 72)


if __name__ == "__main__":
    unittest.main()
