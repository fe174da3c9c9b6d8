"""SurveyAI provider failover client."""

__version__ = "0.3.0"
