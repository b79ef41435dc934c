"""
Projection of a stored analysis into VA Form 21-526EZ data.

Pure functions: nothing here reads or writes the repositories.
"""

import uuid
from collections.abc import Iterable

from ..models import (
    ClaimCandidate,
    ClaimsAnalysis,
    FormData,
    FormDisability,
    FormServiceDetails,
    FormVeteran,
    GeneratedForm,
    VeteranInfo,
    utcnow,
)

FORM_TYPE = "VA-21-526EZ"


def select_claims(
    claims: list[ClaimCandidate], selected_conditions: Iterable[str]
) -> list[ClaimCandidate]:
    """
    Keep the claims whose condition exactly matches a selected name.

    Selected names with no matching claim are ignored. Order follows the
    analysis, not the selection.
    """
    wanted = set(selected_conditions)
    return [claim for claim in claims if claim.condition in wanted]


def _veteran_section(info: VeteranInfo) -> FormVeteran:
    # SSN, date of birth and contact details are never taken from documents
    return FormVeteran(
        name=info.name or "",
        service_number=info.service_number or "",
        branch=info.branch or "",
        service_start_date=info.service_start_date or "",
        service_end_date=info.service_end_date or "",
        rank=info.rank or "",
        discharge_type=info.discharge_type or "",
    )


def _disability_entry(claim: ClaimCandidate, sequence: int) -> FormDisability:
    return FormDisability(
        id=str(uuid.uuid4()),
        sequence=sequence,
        condition=claim.condition,
        description=claim.description or "",
        evidence=list(claim.evidence),
        cfr_reference=claim.cfr_reference or "",
        confidence_score=claim.confidence_score,
        category=claim.category,
        is_primary=claim.is_primary,
        is_presumed=claim.is_presumed,
    )


def build_form(
    analysis: ClaimsAnalysis, selected_conditions: Iterable[str]
) -> GeneratedForm:
    """
    Build the form payload for the selected claims.

    Args:
        analysis: Stored claims analysis.
        selected_conditions: Condition names chosen by the user.

    Returns:
        A freshly generated form; ids and the generation date differ per call.
    """
    claims = select_claims(analysis.potential_claims, selected_conditions)
    service = analysis.service_info

    form_data = FormData(
        form_id=str(uuid.uuid4()),
        form_type=FORM_TYPE,
        generated_date=utcnow(),
        veteran=_veteran_section(analysis.veteran_info),
        disabilities=[
            _disability_entry(claim, sequence)
            for sequence, claim in enumerate(claims, start=1)
        ],
        service_details=FormServiceDetails(
            deployments=list(service.deployments),
            mos=list(service.mos),
            combat_experience=service.combat_experience,
            awards_decorations=list(service.awards_decorations),
            incidents=list(service.incidents),
        ),
    )
    return GeneratedForm(form_data=form_data)
