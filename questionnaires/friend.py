"""
Friendship chemistry catalog: travel, money, emotional support and boundaries.
"""
from questionnaires.questions import DimensionDetail, build_question

FRIEND_QUESTIONS = [
    # Having fun together
    build_question(1, "When you travel together, how should the itinerary look?", "lifestyle", 1.0,
                   ["Every minute planned", "Roughly planned", "Stop and go as we like", "Lazy holiday", "Totally spontaneous"]),
    build_question(2, "How do you feel about splitting the bill or taking turns to pay?", "finance", 1.5,
                   ["Split to the cent", "Roughly split", "Take turns", "Whoever's free pays", "Good friends don't count"]),
    build_question(3, "How much lateness will you put up with at a get-together?", "communication", 1.0,
                   ["Within 5 minutes", "15 minutes is fine", "Half an hour is normal", "Anything under an hour", "Come or don't"]),
    build_question(4, "How often should close friends meet up?", "lifestyle", 1.0,
                   ["Every week", "Every fortnight", "Once a month", "Every few months", "A few times a year is fine"]),

    # Emotional support and boundaries
    build_question(5, "A friend asks to borrow a fair amount of money. What do you do?", "finance", 2.0,
                   ["Never lend, however close", "Only with an IOU", "Depends on the friend and amount", "Lend if we're close", "Always help when asked"]),
    build_question(6, "A friend is down late at night and wants to vent. How do you react?", "communication", 1.5,
                   ["No late-night calls", "Okay, but keep it short", "Listen without advising", "Analyse and advise", "Always there, all in"]),
    build_question(7, "Do you open up about private matters or secrets?", "intimacy", 1.5,
                   ["Never", "Rarely", "Depends how close we are", "Often", "Tell each other everything"]),
    build_question(8, "If a friend does something that bothers you, how do you handle it?", "values", 2.0,
                   ["Say it straight", "Bring it up gently", "Drop a hint", "Let it go", "Quietly drift away"]),
]

FRIEND_DIMENSION_DETAILS = {
    "lifestyle": DimensionDetail("Part 1: Having fun", "Travel, get-togethers and how often you meet."),
    "finance": DimensionDetail("Part 2: Money", "Splitting bills and lending money."),
    "communication": DimensionDetail("Part 3: Boundaries", "Time boundaries and emotional support."),
    "intimacy": DimensionDetail("Part 4: Closeness", "Sharing private matters and trust."),
    "values": DimensionDetail("Part 5: Principles", "How you handle conflict."),
}
