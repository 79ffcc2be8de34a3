"""
Escalation Engine — Lexicon Tables
====================================
Every static word list, emoticon table, weight and scope window used by the
sentiment analyzer and the trigger detector. Control flow lives in
sentiment.py / triggers.py; tuning happens here.

All words are lowercase. Emoticons keep their canonical spelling and are
matched case-insensitively.
"""

# ---------------------------------------------------------------------------
# Sentiment lexicon
# ---------------------------------------------------------------------------

POSITIVE_WORDS = frozenset({
    "good", "great", "excellent", "amazing", "wonderful", "fantastic", "awesome",
    "perfect", "love", "like", "happy", "pleased", "satisfied", "helpful", "thank",
    "thanks", "appreciate", "brilliant", "superb", "nice", "best", "beautiful",
    "delighted", "thrilled", "excited", "grateful", "impressive", "outstanding",
    "remarkable", "terrific", "marvelous", "pleasant", "enjoy", "enjoyed", "loving",
    "glad", "cheerful", "joyful", "fabulous", "splendid", "magnificent",
    "incredible", "better", "resolved", "fixed",
})

NEGATIVE_WORDS = frozenset({
    "bad", "terrible", "awful", "horrible", "poor", "worst", "hate", "angry",
    "frustrated", "annoyed", "disappointed", "disappointing", "upset", "unhappy",
    "dissatisfied", "problem", "issue", "broken", "error", "fail", "failed",
    "failure", "wrong", "useless", "stupid", "ridiculous", "absurd", "incompetent",
    "pathetic", "unacceptable", "disgusting", "disgusted", "furious", "outraged",
    "appalled", "dreadful", "atrocious", "abysmal", "inferior", "defective",
    "faulty", "inadequate", "hopeless", "miserable", "deplorable", "waste",
    "wasted", "worse",
})

# Flip the polarity of the next sentiment word inside NEGATION_WINDOW tokens.
NEGATIONS = frozenset({
    "not", "no", "never", "neither", "nobody", "nothing", "nowhere", "none",
    "hardly", "barely", "scarcely", "doesn't", "don't", "didn't", "isn't",
    "aren't", "wasn't", "weren't", "won't", "wouldn't", "couldn't", "shouldn't",
    "can't", "cannot", "haven't", "hasn't", "nor",
})

# Scale up the next sentiment word inside INTENSIFIER_WINDOW tokens.
INTENSIFIERS = frozenset({
    "very", "really", "extremely", "incredibly", "absolutely", "totally",
    "completely", "utterly", "highly", "deeply", "so", "such", "particularly",
    "especially", "exceptionally", "remarkably", "extraordinarily",
})

POSITIVE_EMOTICONS = (
    ":)", ":-)", ":D", ":-D", ";)", ";-)", ":P", ":-P", "<3",
    "❤️", "❤", "\U0001F44D", "\U0001F60A", "\U0001F600",
    "\U0001F389", "\U0001F4AF", "\U0001F642",
)

NEGATIVE_EMOTICONS = (
    ":(", ":-(", ":/", ":-/", ":'(",
    "\U0001F622", "\U0001F61E", "\U0001F620", "\U0001F44E", "\U0001F621",
    "\U0001F624", "\U0001F641",
)

# ---------------------------------------------------------------------------
# Weights and scope windows
# ---------------------------------------------------------------------------

WORD_WEIGHT = 1.0
EMOTICON_WEIGHT = 0.75
INTENSIFIER_MULTIPLIER = 1.5
NEGATION_SCALE = 0.5          # "not good" is weaker than "bad"

NEGATION_WINDOW = 3
INTENSIFIER_WINDOW = 2

# Raw contribution sum at which magnitude reaches 1.0
MAGNITUDE_SATURATION = 5.0

# Confidence: 0 without signals, else base + step per distinct signal
CONFIDENCE_BASE = 0.3
CONFIDENCE_STEP = 0.2
CONVERSATION_CONFIDENCE_STEP = 0.15

# Message i (0-based) weighs RECENCY_BASE ** i
RECENCY_BASE = 1.5

MIN_TREND_MESSAGES = 3
TREND_EPSILON = 0.1

DEFAULT_ESCALATION_THRESHOLD = -0.5

# Label thresholds: bands are contiguous, neutral is inclusive on both ends
VERY_POSITIVE_ABOVE = 0.5
POSITIVE_ABOVE = 0.2
NEGATIVE_BELOW = -0.2
VERY_NEGATIVE_BELOW = -0.5

# ---------------------------------------------------------------------------
# Trigger defaults
# ---------------------------------------------------------------------------

DEFAULT_SENTIMENT_THRESHOLD = -0.5
DEFAULT_MAX_TURNS = 10

DEFAULT_KEYWORDS = (
    "cancel", "refund", "lawsuit", "lawyer", "attorney",
    "supervisor", "manager", "urgent", "emergency",
)

DEFAULT_PHRASES = (
    "this is unacceptable", "I want to speak", "escalate this",
    "file a complaint", "report this", "I demand", "I insist",
    "not good enough", "waste of time", "incompetent",
)

EXPLICIT_REQUEST_PHRASES = (
    "talk to a human", "speak to a human", "speak with a human", "talk with a human",
    "human agent", "real person", "live agent", "live person", "actual person",
    "real agent", "talk to someone", "speak to someone", "talk to a person",
    "speak to a person", "speak with a person", "talk to an agent",
    "speak to an agent", "speak with an agent", "connect me to", "connect me with",
    "transfer me", "get me a person", "get me a human", "need a human",
    "want a human", "human being", "customer service representative",
)

FRUSTRATION_INDICATORS = (
    "frustrated", "annoyed", "angry", "upset", "ridiculous",
    "absurd", "stupid", "useless", "terrible", "awful", "horrible", "worst",
    "hate", "disgusted", "fed up", "sick of", "tired of",
)

FRUSTRATION_MIN_INDICATORS = 2

# Keywords that raise a keyword trigger to high priority
HIGH_PRIORITY_KEYWORDS = frozenset({"lawsuit", "lawyer", "attorney", "refund", "cancel"})

URGENT_SENTIMENT_CONFIDENCE = 0.8
