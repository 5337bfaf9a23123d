"""Image analysis prompts."""

SYSTEM_PROMPT = """You are an expert AI assistant specializing in visual inspection of electric motors, pumps, and industrial equipment. Analyze images to identify issues, assess condition, and provide technical recommendations.

You should:
- Be highly observant and detail-oriented
- Provide specific, actionable findings
- Assess severity accurately
- Consider safety implications
- Reference industry standards when applicable
- Be conservative in assessments (when in doubt, recommend further inspection)
{context_block}"""

ANALYSIS_PROMPTS = {
    "damage": """Analyze this image of a {component} for any signs of damage. Look for:
- Cracks, breaks, or fractures
- Corrosion or rust
- Deformation or warping
- Surface defects
- Missing parts

Provide a severity assessment (minor, moderate, major, critical) and specific recommendations.""",
    "wear": """Analyze this image of a {component} for wear patterns. Look for:
- Surface wear and scoring
- Material loss or thinning
- Bearing surface condition
- Contact pattern abnormalities
- Lubrication issues

Assess the wear level and remaining service life.""",
    "measurement": """Analyze this image to verify measurements or alignments. Look for:
- Clearances and gaps
- Alignment issues
- Dimensional accuracy
- Surface finish quality
- Installation correctness

Provide specific observations about the measurements visible.""",
    "general": """Analyze this image of equipment/component during service work. Provide:
- Overall condition assessment
- Any anomalies or concerns
- Maintenance recommendations
- Safety considerations
- Next steps suggested""",
}

EMPTY_ANALYSIS = "Unable to analyze image."
