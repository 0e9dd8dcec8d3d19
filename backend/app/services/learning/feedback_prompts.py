"""
Feedback Prompts

LLM prompts for advisory tutor feedback on learner answers.

These prompts are used by FeedbackService for:
1. Typed and selected answers (multiple choice, fill blank, translate)
2. Spoken answers (speech recognition transcripts)

Responses are free text shown next to the verdict; nothing is parsed.
"""


# =============================================================================
# Exercise Feedback
# =============================================================================

EXERCISE_SYSTEM_PROMPT = (
    "You are a helpful {language} language tutor. Provide constructive "
    "feedback on student answers. Be encouraging and educational."
)

EXERCISE_FEEDBACK_PROMPT = """The student is learning {language}.

Exercise type: {kind}
Question: "{question}"
Correct answer: "{correct_answer}"
Student's answer: "{answer}"

Provide:
1. Accuracy assessment
2. What they did well
3. What needs improvement
4. A brief explanation or tip

Keep it concise (2-3 sentences)."""


# =============================================================================
# Speaking Feedback
# =============================================================================

SPEAKING_SYSTEM_PROMPT = (
    "You are a helpful language learning assistant. Provide constructive "
    "feedback on pronunciation, grammar, and accuracy. Be encouraging and specific."
)

SPEAKING_FEEDBACK_PROMPT = """The student is learning {language}. They were asked to say: "{expected}"

They said: "{speech}"

Please provide:
1. Accuracy assessment (correct/needs improvement)
2. Pronunciation feedback
3. Grammar feedback (if applicable)
4. Encouragement

Keep the response concise (2-3 sentences)."""
