from __future__ import annotations

# ---------- Per-attempt feedback ----------
FEEDBACK_THOROUGH = "✓ Thorough investigation"
FEEDBACK_PARTIAL = "⚠ Could investigate more before deciding"
FEEDBACK_LIMITED = "✗ Limited investigation"

FEEDBACK_OPTIMAL = "✓ Correct recommendation type"
FEEDBACK_NOT_OPTIMAL = "✗ Recommendation doesn't match optimal choice"

FEEDBACK_CLIENT_REVIEWED = "✓ Considered client profile"
FEEDBACK_CLIENT_SKIPPED = "⚠ Should review client information"

FEEDBACK_QUICK = "✓ Efficient decision"
FEEDBACK_SLOW = "⚠ Took a long time to decide"

# ---------- Day insights ----------
# Each rule: (metric, threshold, comparison, text). Metrics are DayAnalytics fields.
# Rules are evaluated top to bottom; at most one rule per metric fires.
INSIGHT_RULES = [
    ("investigation_rate", 0.8, "ge", "Excellent research habits: you dug through the evidence before advising."),
    ("investigation_rate", 0.5, "lt", "Check more clues before recommending; tips, headlines and charts all matter."),
    ("client_files_rate", 0.8, "ge", "You consistently reviewed client profiles before advising."),
    ("client_files_rate", 0.5, "lt", "Open the client file more often; risk tolerance should shape your advice."),
    ("optimal_decision_rate", 0.8, "ge", "Strong market instincts: most of your calls were optimal."),
    ("optimal_decision_rate", 0.5, "lt", "Many recommendations missed the optimal choice; weigh the evidence more carefully."),
    ("perfect_scores", 1, "ge", "Outstanding work: at least one client got an A-grade recommendation today."),
]

# ---------- Client reactions ----------
REACTION_WORRIED = "Are you sure? That seems quite risky for someone like me..."
REACTION_GRATEFUL = "Excellent! Thank you for your professional advice."
REACTION_CAUTIOUS = "I understand. Better to be safe than sorry."
REACTION_UNSURE = "Hmm, I'll need to think about this more."
