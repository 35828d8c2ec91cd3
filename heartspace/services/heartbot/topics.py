"""
HeartBot topics, keyword rules and reply pools.

KEYWORD_RULES is evaluated top to bottom and the first rule with a keyword
contained in the lower-cased message wins. Keyword sets overlap on purpose
in a few places ("burnout" is both a work and a self-care word), so the
order below is the tie-break and must stay stable.
"""
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


class Topic(str, Enum):
    """Reply categories HeartBot can recognise."""
    ANXIETY = "anxiety"
    LONELINESS = "loneliness"
    SLEEP = "sleep"
    WORK = "work"
    RELATIONSHIPS = "relationships"
    SELFCARE = "selfcare"
    GRATITUDE = "gratitude"
    OVERWHELMED = "overwhelmed"
    POSITIVE = "positive"
    RELAX = "relax"
    DIFFICULT = "difficult"
    BREATHING = "breathing"
    MOTIVATION = "motivation"
    DEFAULT = "default"


KEYWORD_RULES: Tuple[Tuple[Topic, Tuple[str, ...]], ...] = (
    (Topic.ANXIETY, ("anxious", "anxiety", "panic", "worried", "worry", "nervous", "scared", "afraid")),
    (Topic.LONELINESS, ("lonely", "loneliness", "alone", "isolated", "no friends", "left out")),
    (Topic.SLEEP, ("sleep", "insomnia", "tired", "exhausted", "nightmare", "can't rest")),
    (Topic.WORK, ("work", "job", "boss", "deadline", "career", "office", "coworker", "burnout")),
    (Topic.RELATIONSHIPS, ("relationship", "partner", "breakup", "break up", "friend", "family", "argument")),
    (Topic.SELFCARE, ("self-care", "self care", "selfcare", "burnout", "me time", "recharge", "take care of myself")),
    (Topic.GRATITUDE, ("grateful", "gratitude", "thankful", "thank you", "blessed", "appreciate")),
    (Topic.OVERWHELMED, ("overwhelm", "stress", "too much")),
    (Topic.POSITIVE, ("positive", "good", "happy")),
    (Topic.RELAX, ("relax", "calm", "peace")),
    (Topic.DIFFICULT, ("difficult", "hard", "tough", "bad day")),
    (Topic.BREATHING, ("breath", "breathing")),
    (Topic.MOTIVATION, ("motivat", "inspire", "encourage")),
)


_POOLS = {
    Topic.ANXIETY: (
        "Anxiety can feel so loud, but you are safer than your thoughts are telling you right now. Let's slow down together: name five things you can see around you. 🌿",
        "That worried feeling is your mind trying to protect you. Thank it, and then gently remind yourself: right now, in this moment, you are okay. 💙",
        "When panic rises, press your feet into the floor and feel the ground holding you. You don't have to solve everything this minute. 🌸",
    ),
    Topic.LONELINESS: (
        "Feeling alone is one of the heaviest feelings there is. I'm really glad you reached out, and I'm here with you right now. 💖",
        "Loneliness doesn't mean you are unlovable. It means you have a big heart looking for connection, and that's a beautiful thing. 🌷",
        "Is there one person you could send a small message to today? Even a tiny hello can open a door. I'm cheering you on. 🕊️",
    ),
    Topic.SLEEP: (
        "Rest matters so much. Try putting your screen away, dimming the lights, and breathing slowly for a few minutes before bed. 🌙",
        "If your mind won't quiet down at night, try writing your thoughts on paper so they can wait until morning. You deserve peaceful rest. 💤",
        "Being tired makes everything feel heavier. Be extra gentle with yourself today, you're doing the best you can. 🌌",
    ),
    Topic.WORK: (
        "Work can ask so much of us. Remember that your worth is not measured by your productivity. 💼💙",
        "When work feels like too much, try breaking the next task into the smallest possible step. Just that one. You've got this. 🌱",
        "It's okay to set boundaries at work. Taking breaks isn't laziness, it's how you keep going. 🌤️",
    ),
    Topic.RELATIONSHIPS: (
        "Relationships can bring our deepest joys and our hardest moments. Your feelings about this are completely valid. 💞",
        "It takes courage to care about people. What do you need most right now: to be heard, or to find a way forward? 🌸",
        "Remember that you can love someone and still protect your own peace. Both can be true at once. 🕊️",
    ),
    Topic.SELFCARE: (
        "Taking care of yourself is not selfish, it's necessary. What's one kind thing you could do for yourself today? 🛁",
        "Self-care can be small: a glass of water, a short walk, five minutes of quiet. Every little bit counts. 🌼",
        "You pour so much into others. You deserve that same tenderness from yourself. 💖",
    ),
    Topic.GRATITUDE: (
        "Gratitude is such a gentle superpower. Thank you for sharing that light with me. ✨",
        "Noticing the good, even the small good, rewires your heart toward hope. Maybe add this to your gratitude journal? 📖",
        "What a beautiful thing to feel thankful for. Hold on to this moment. 🌟",
    ),
    Topic.OVERWHELMED: (
        "I hear you, and it's completely okay to feel overwhelmed. Let's take this one breath at a time. Try the 4-7-8 breathing technique: breathe in for 4, hold for 7, exhale for 8. 🌸",
        "When everything feels too much, remember that you don't have to carry it all at once. What's one small thing you can focus on right now? 💙",
        "Feeling overwhelmed is your mind's way of saying you need a pause. Can you give yourself permission to rest for just 5 minutes? 🕊️",
    ),
    Topic.POSITIVE: (
        "Here's something beautiful for you: You are braver than you believe, stronger than you seem, and more loved than you know. ✨",
        "Every day you choose to keep going is an act of courage. Today, you're here, you're trying, and that's everything. 🌟",
        "You have survived 100% of your difficult days so far. That's an incredible track record. 💖",
    ),
    Topic.RELAX: (
        "Let's create a peaceful moment together. Close your eyes and imagine you're in your favorite calm place. What do you see, hear, and feel there? 🌺",
        "Try this: Place one hand on your chest and one on your belly. Breathe slowly and feel your body naturally calming down. You're safe. 🌊",
        "Relaxation is a gift you give yourself. Let your shoulders drop, soften your jaw, and know that this moment is yours. 🕯️",
    ),
    Topic.DIFFICULT: (
        "Difficult days don't last, but resilient people like you do. You're going through something hard, and that takes strength. 🌱",
        "It's okay to not be okay today. Your feelings are valid, and you don't have to pretend otherwise. Tomorrow is a new day. 🌙",
        "Even in the hardest moments, you're growing. This difficult time is teaching you something about your own strength. 💪",
    ),
    Topic.BREATHING: (
        "Let's breathe together. Inhale slowly for 4 counts... 1, 2, 3, 4. Hold for 4... 1, 2, 3, 4. Exhale for 6... 1, 2, 3, 4, 5, 6. Feel better? 🌸",
        "Here's a gentle breathing exercise: Breathe in peace, breathe out tension. Breathe in love, breathe out worry. You're doing great. 💙",
        "Place your hand on your heart. Feel it beating - that's your life force, steady and strong. Match your breathing to that gentle rhythm. ❤️",
    ),
    Topic.MOTIVATION: (
        "You don't need to be perfect, you just need to be you. And you are enough, exactly as you are, right now. 🌟",
        "Every small step forward is progress. You don't have to leap mountains - just take the next gentle step. 🦋",
        "Believe in yourself like I believe in you. You have everything within you to handle whatever comes your way. ✨",
    ),
    Topic.DEFAULT: (
        "Thank you for sharing with me. I'm here to listen and support you. What's on your heart today? 💙",
        "Your feelings matter, and so do you. I'm here to walk alongside you in this moment. How can I help? 🌸",
        "Sometimes we just need someone to remind us that we're not alone. You're not alone - I'm here with you. 💖",
    ),
}

RESPONSE_POOLS: Mapping[Topic, Tuple[str, ...]] = MappingProxyType(_POOLS)

WELCOME_MESSAGE = (
    "Hello, beautiful soul! 💖 I'm HeartBot, your emotional support companion. "
    "I'm here to listen, comfort, and guide you through whatever you're feeling. "
    "What's on your heart today?"
)

SUGGESTED_PROMPTS: Tuple[str, ...] = (
    "I'm feeling overwhelmed",
    "I need something positive to read",
    "Help me relax",
    "I'm having a difficult day",
    "Can you guide me through breathing?",
    "I need motivation",
)


def _check_pools() -> None:
    missing = [topic.value for topic in Topic if not RESPONSE_POOLS.get(topic)]
    if missing:
        raise RuntimeError(f"HeartBot reply pools are empty for: {', '.join(missing)}")


_check_pools()
