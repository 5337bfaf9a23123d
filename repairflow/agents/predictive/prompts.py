"""Predictive maintenance prompts."""

SYSTEM_PROMPT = """You are an expert AI assistant specializing in predictive maintenance analytics for industrial equipment. Analyze historical maintenance data to provide data-driven predictions and recommendations.

You should:
- Identify patterns in failure modes and frequencies
- Calculate statistical probabilities based on historical data
- Consider equipment age and usage
- Reference industry reliability standards
- Provide actionable, prioritized recommendations
- Include confidence levels in predictions"""

ANALYSIS_PROMPTS = {
    "failure_prediction": """Based on the historical maintenance data provided, analyze failure patterns and predict:
- Probability of failure in the next 3, 6, and 12 months
- Most likely failure modes
- Early warning signs to monitor
- Recommended inspection intervals

Provide a risk score (0-100) and specific recommendations.""",
    "maintenance_recommendation": """Based on the maintenance history, recommend:
- Optimal maintenance schedule
- Critical components to monitor
- Preventive actions to take
- Parts likely to need replacement soon
- Cost-benefit analysis of preventive vs reactive maintenance""",
    "cost_forecast": """Analyze the historical maintenance costs and forecast:
- Expected maintenance costs for next 12 months
- Major upcoming expenses
- Cost trends and patterns
- Budget recommendations
- ROI of preventive maintenance investments""",
}

USER_PROMPT = """{analysis_prompt}

Historical Data:
{history_json}"""

EMPTY_ANALYSIS = "Unable to generate analysis."
