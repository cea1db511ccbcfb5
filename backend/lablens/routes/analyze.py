"""Analysis API route: classifies a lab submission and summarizes it.

Request bodies are validated by the Submission schema before the engine
runs; malformed bodies are rejected with 422 and a list of offending fields.
"""

from fastapi import APIRouter, Depends

from lablens.auth import verify_api_key
from lablens.schemas import AnalysisResult, Submission
from lablens.services.analyzer import analyze_submission

router = APIRouter(prefix="/analyze", tags=["analysis"])


@router.post("", response_model=AnalysisResult)
async def analyze(
    submission: Submission,
    _api_key: str = Depends(verify_api_key),
) -> AnalysisResult:
    """Analyze a validated lab submission.

    Args:
        submission: Panels of markers to classify.

    Returns:
        AnalysisResult with overall severity, summary bullets and panel findings.
    """
    return analyze_submission(submission)
