"""
Shared test doubles and sample submissions.
"""

import json

from scamradar.llm import LLMProvider

MESSAGE = (
    "URGENT: Your bank account will be suspended. "
    "Send your password and bank account number now to verify."
)
EXPLANATION = (
    "This message is urgent and demands immediate action before a deadline. "
    "It requests your password and bank account number and pushes a wire "
    "transfer through online banking."
)


class MockLLM(LLMProvider):
    """Mock LLM that returns a pre-configured assessment."""

    def __init__(self, reply=None, raw_text=None, error=None):
        self._reply = reply if reply is not None else {
            "is_scam": True,
            "probability": 60,
            "confidence": "High",
            "risk_level": "High",
            "explanation": EXPLANATION,
            "explanation_tagalog": "Ito ay scam.",
            "advice": "Do not reply.",
            "tips": ["Never share your OTP."],
            "where_to_report": [{"name": "PNP ACG", "url": "https://www.pnpacg.ph/"}],
        }
        self._raw_text = raw_text
        self._error = error
        self.calls = []

    async def generate(self, prompt, system_instruction=None, temperature=0.7,
                       json_mode=False, media=None):
        self.calls.append({"prompt": prompt, "media": media, "json_mode": json_mode})
        if self._error is not None:
            raise self._error
        if self._raw_text is not None:
            return self._raw_text
        return json.dumps(self._reply)
