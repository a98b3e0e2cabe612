"""Advisor - conversational financial advice over a hosted LLM.

The advisor is a thin layer around a text-completion endpoint:
- rate_gate.py: client-side request-frequency limiter
- prompt_builder.py: system instruction + financial context + recent history
- candidates.py: ordered model fallback with sticky last-success memory
- client.py: the model call itself (Gemini via the OpenAI SDK)
- session.py: AdvisorSession, tying the above together per user
"""
