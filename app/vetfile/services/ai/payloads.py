"""
Bundled analysis payloads.

The mock analysis backs development mode; the fallback analysis is served
whenever the provider call fails so callers always receive a well-formed
payload.
"""

from ...models import ClaimsAnalysis


def get_mock_analysis() -> ClaimsAnalysis:
    """Return the sample analysis used when mock mode is enabled."""
    return ClaimsAnalysis.model_validate(
        {
            "veteranInfo": {
                "name": "John A. Smith",
                "serviceNumber": "123-45-6789",
                "branch": "U.S. Army",
                "serviceStartDate": "2008-06-15",
                "serviceEndDate": "2016-08-22",
                "rank": "E-5/Sergeant",
                "dischargeType": "Honorable",
            },
            "potentialClaims": [
                {
                    "condition": "Post-Traumatic Stress Disorder (PTSD)",
                    "description": (
                        "Combat-related PTSD with symptoms including nightmares, "
                        "hypervigilance, and anxiety"
                    ),
                    "evidence": [
                        "Combat deployment to Afghanistan",
                        "Combat Infantry Badge indicates combat experience",
                        "Medical record mentions anxiety symptoms",
                    ],
                    "cfrReference": "38 CFR 4.130, DC 9411",
                    "confidenceScore": 85,
                    "category": "mental",
                    "isPresumed": False,
                    "isPrimary": True,
                },
                {
                    "condition": "Tinnitus",
                    "description": "Ringing in the ears due to combat noise exposure",
                    "evidence": [
                        "Infantry MOS with exposure to weapons fire",
                        "Combat deployment with likely noise exposure",
                    ],
                    "cfrReference": "38 CFR 4.87, DC 6260",
                    "confidenceScore": 80,
                    "category": "physical",
                    "isPresumed": False,
                    "isPrimary": True,
                },
                {
                    "condition": "Lumbar Strain",
                    "description": "Chronic lower back pain due to carrying heavy equipment",
                    "evidence": [
                        "Infantry MOS requiring carrying heavy loads",
                        "Multiple deployments with combat gear",
                    ],
                    "cfrReference": "38 CFR 4.71a, DC 5237",
                    "confidenceScore": 70,
                    "category": "physical",
                    "isPresumed": False,
                    "isPrimary": True,
                },
            ],
            "serviceInfo": {
                "deployments": ["Afghanistan (2012-2013)", "Iraq (2009-2010)"],
                "mos": ["11B Infantry"],
                "combatExperience": True,
                "awardsDecorations": [
                    "Combat Infantry Badge",
                    "Army Commendation Medal",
                ],
                "incidents": ["Engaged in firefight on 2013-03-15"],
            },
            "recommendations": {
                "additionalEvidence": [
                    "Consider obtaining buddy statements from fellow soldiers",
                    "Request complete medical records from VA",
                    "Schedule VA C&P exam for PTSD",
                ],
                "priorityClaims": [
                    "Post-Traumatic Stress Disorder (PTSD)",
                    "Tinnitus",
                ],
            },
        }
    )


def get_fallback_analysis() -> ClaimsAnalysis:
    """Return the placeholder analysis served when the provider fails."""
    return ClaimsAnalysis.model_validate(
        {
            "veteranInfo": {},
            "potentialClaims": [
                {
                    "condition": "Analysis Error",
                    "description": (
                        "There was an error analyzing your documents. This could be "
                        "due to technical issues or document quality."
                    ),
                    "evidence": ["Error processing document content"],
                    "cfrReference": None,
                    "confidenceScore": 0,
                    "category": "other",
                    "isPresumed": False,
                    "isPrimary": True,
                }
            ],
            "serviceInfo": {},
            "recommendations": {
                "additionalEvidence": [
                    "Try uploading clearer copies of your documents",
                    "Include both your DD214 and medical records if available",
                ],
                "priorityClaims": [],
            },
        }
    )
