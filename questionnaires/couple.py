"""
Couple compatibility catalog (questionnaire v2.2).

Five layers, weighted by how hard they are to negotiate later:
lifestyle 1.0, finance 1.5, communication 1.5, intimacy 2.0, values 2.0.
"""
from questionnaires.questions import DimensionDetail, build_question

COUPLE_QUESTIONS = [
    # ── Layer 1: Lifestyle (12 questions, weight 1.0) ────────────────
    build_question(1, "How tidy do you need your home to be?", "lifestyle", 1.0,
                   ["Easy-going", "Fairly relaxed", "Average", "Fairly neat", "Spotless"]),
    build_question(2, "How much do you mind your partner's sleep schedule (night owl / early bird)?", "lifestyle", 1.0,
                   ["Must be in sync", "Mostly in sync", "Depends", "Don't mind much", "Not my business"]),
    build_question(3, "How do you feel about keeping pets such as cats or dogs?", "lifestyle", 1.0,
                   ["Absolutely not", "Hard to accept", "Neutral", "Happy to", "A must"]),
    build_question(4, "How do you feel about a partner who smokes, drinks or has similar habits?", "lifestyle", 1.0,
                   ["Zero tolerance", "Rather not", "Neutral", "Fine in moderation", "Don't care"]),
    build_question(5, "How would you rather spend a free weekend?", "lifestyle", 1.0,
                   ["Fully at home", "Mostly at home", "Depends on mood", "Mostly out", "Must get out"]),
    build_question(6, "How firmly do you stick to your food preferences (spice, salt)?", "lifestyle", 1.0,
                   ["Very picky", "Fairly picky", "Average", "Fairly flexible", "Eat anything"]),
    build_question(7, "How often do you expect to exercise?", "lifestyle", 1.0,
                   ["Never", "Now and then", "1-2 times a week", "3-4 times a week", "Every day"]),
    build_question(8, "How much order do you need in where things are kept?", "lifestyle", 1.0,
                   ["Organised chaos", "Roughly in place", "Average", "Neatly arranged", "Everything in its exact spot"]),
    build_question(9, "How would you split housework?", "lifestyle", 1.0,
                   ["Whoever feels like it", "Rough division", "Whoever is free", "Clear division", "Strict rota or outsource"]),
    build_question(10, "How do you feel about screen time (phones, games)?", "lifestyle", 1.0,
                   ["Strictly limited", "Less is better", "Moderation", "Fairly relaxed", "Total freedom"]),
    build_question(11, "What is your preferred travel style?", "lifestyle", 1.0,
                   ["Wander freely", "Rough plan", "Semi-guided", "Detailed itinerary", "Tick every sight off"]),
    build_question(12, "How much personal space (time alone) do you need?", "lifestyle", 1.0,
                   ["Always together", "Mostly together", "Balanced", "Quite a lot alone", "A great deal alone"]),

    # ── Layer 2: Finance (10 questions, weight 1.5) ──────────────────
    build_question(13, "For shared spending, do you prefer splitting bills or pooling money?", "finance", 1.5,
                   ["Strict split", "Split big items", "Take turns", "Mostly shared", "Fully pooled"]),
    build_question(14, "How tolerant are you of your partner's spending habits?", "finance", 1.5,
                   ["Must be frugal", "Leaning frugal", "Moderate", "Leaning indulgent", "Enjoy the moment"]),
    build_question(15, "How would you rate your own impulse spending?", "finance", 1.5,
                   ["Never impulsive", "Rarely", "Occasionally", "Often", "Shopaholic"]),
    build_question(16, "Should your partner know all of your income and spending?", "finance", 1.5,
                   ["Fully private", "Keep some privacy", "Depends", "Mostly open", "Fully transparent"]),
    build_question(17, "How do you feel about spending on credit (cards, buy-now-pay-later)?", "finance", 1.5,
                   ["Strongly against", "Avoid it", "Neutral", "Acceptable", "Completely normal"]),
    build_question(18, "What is your risk appetite for investing?", "finance", 1.5,
                   ["Very conservative (savings)", "Steady", "Balanced", "Aggressive", "High risk, high return"]),
    build_question(19, "How should big purchases (car, home) be decided?", "finance", 1.5,
                   ["Each decides alone", "Just inform", "Quick chat", "Decide together", "Must fully agree"]),
    build_question(20, "How important is money to a happy life?", "finance", 1.5,
                   ["Enough is enough", "A basic safety net", "Important", "Very important", "The deciding factor"]),
    build_question(21, "Do you keep track of your spending?", "finance", 1.5,
                   ["Never", "Occasionally", "Big items only", "Often", "Every single item"]),
    build_question(22, "Would you mind if your partner earned much more or much less than you?", "finance", 1.5,
                   ["Mind a lot", "Mind a little", "Depends", "Not really", "Not at all"]),

    # ── Layer 3: Communication (10 questions, weight 1.5) ────────────
    build_question(23, "When you disagree, do you sort it out at once or need time to cool off?", "communication", 1.5,
                   ["Talk it out now", "Same day", "Depends", "Cool off first", "Avoid and cool down"]),
    build_question(24, "How involved do you want to be in your partner's friends and social life?", "communication", 1.5,
                   ["Fully part of it", "Join often", "Join now and then", "Rarely join", "Separate circles"]),
    build_question(25, "Should emotions in a relationship be measured and restrained?", "communication", 1.5,
                   ["Let it all out", "Say it directly", "Depends on the setting", "Hold back", "Highly restrained"]),
    build_question(26, "When your partner is upset over something small, do you comfort or reason?", "communication", 1.5,
                   ["Comfort straight away", "Comfort, then reason", "Depends", "Reason first", "Stick to reasoning"]),
    build_question(27, "How quickly do you expect your partner to reply to messages?", "communication", 1.5,
                   ["Instantly", "As soon as seen", "After they're free", "Whenever", "Prefer calls anyway"]),
    build_question(28, "How acceptable are white lies?", "communication", 1.5,
                   ["Never", "Be honest where possible", "Depends on intent", "Acceptable", "Needed for harmony"]),
    build_question(29, "When you're in a bad mood, how should your partner respond?", "communication", 1.5,
                   ["Quiet company", "Listen, don't judge", "A hug", "Give advice", "Help me solve it"]),
    build_question(30, "How much public display of affection is okay?", "communication", 1.5,
                   ["None at all", "Holding hands only", "Moderate", "Fairly open", "Ignore onlookers"]),
    build_question(31, "What boundaries do you expect around close friends of the other sex (or same sex)?", "communication", 1.5,
                   ["Extremely sensitive", "Fairly sensitive", "Normal socialising", "Fairly relaxed", "Complete trust"]),
    build_question(32, "Which communication style suits you?", "communication", 1.5,
                   ["Subtle and indirect", "Fairly indirect", "In between", "Fairly direct", "Blunt"]),

    # ── Layer 4: Intimacy & family (8 questions, weight 2.0) ─────────
    build_question(33, "How much physical or emotional closeness do you need?", "intimacy", 2.0,
                   ["Very little", "Low, more mental", "Moderate, balanced", "High", "Very high, strongly reliant"]),
    build_question(34, "How much do you value **occasions** like anniversaries and holidays?", "intimacy", 2.0,
                   ["Not at all", "Now and then", "Depends", "Quite a lot", "Must be marked, carefully planned"]),
    build_question(35, "How do you picture life with **both families of origin**?", "intimacy", 2.0,
                   ["No contact", "Holiday visits only", "Some contact, clear boundaries", "Regular contact, mutual help", "Fully part of each other's family"]),
    build_question(36, "What is your clear position on **having children**?", "intimacy", 2.0,
                   ["Definitely child-free", "Leaning child-free", "Let it happen", "Leaning towards kids", "Must have kids"]),
    build_question(37, "How should **shared property** before marriage or while living together be handled?", "intimacy", 2.0,
                   ["Strictly divided", "Mostly separate", "Depends", "Mostly shared", "Everything shared"]),
    build_question(38, "How would you feel if your partner still kept in touch with an ex?", "intimacy", 2.0,
                   ["Unacceptable", "Deeply uncomfortable", "Depends", "Fine as plain friends", "Complete trust"]),
    build_question(39, "Where does your **sense of security** in a relationship mainly come from?", "intimacy", 2.0,
                   ["Financial footing and material commitment", "Steady behaviour and time invested", "A balance", "Clear spoken promises", "Unconditional love and trust"]),
    build_question(40, "How do you most want to receive emotional support (love language)?", "intimacy", 2.0,
                   ["Acts of service", "Thoughtful gifts", "Quality time", "Words of affirmation", "Physical touch"]),

    # ── Layer 5: Core values (10 questions, weight 2.0) ──────────────
    build_question(41, "Between personal growth and family duty, which comes first?", "values", 2.0,
                   ["Family first", "Leaning family", "Balanced", "Leaning career", "Personal career first"]),
    build_question(42, "How do you view big life risks (investing, moving city)?", "values", 2.0,
                   ["Safe and stable", "Leaning safe", "Middle ground", "Leaning adventurous", "Bold and aggressive"]),
    build_question(43, "How serious is breaking a commitment, such as being late or cancelling?", "values", 2.0,
                   ["Very serious", "Fairly serious", "Average", "Fairly forgiving", "Flexible"]),
    build_question(44, "Which matters more in your life, emotional needs or rational analysis?", "values", 2.0,
                   ["Driven by feeling", "Leaning feeling", "Balanced", "Leaning reason", "Reason rules"]),
    build_question(45, "Should right and wrong have absolute standards?", "values", 2.0,
                   ["Absolute standards", "Mostly standards", "Depends on context", "Mostly relative", "Fully relative"]),
    build_question(46, "Do you agree that 'nobody is perfect, so there's no need to change'?", "values", 2.0,
                   ["Disagree (keep improving)", "Mostly disagree", "Neutral", "Mostly agree", "Agree (accept yourself)"]),
    build_question(47, "How much do you follow current affairs and politics?", "values", 2.0,
                   ["Not at all", "Occasionally", "Average", "Often", "Love debating it"]),
    build_question(48, "What does 'success' mean to you?", "values", 2.0,
                   ["Wealth and status", "Social recognition", "Balance", "Inner contentment", "Freedom and joy"]),
    build_question(49, "What is your attitude to rules?", "values", 2.0,
                   ["Follow strictly", "Follow where possible", "Depends", "Bend when needed", "Made to be broken"]),
    build_question(50, "Is a calm, uneventful life the natural end point of marriage?", "values", 2.0,
                   ["Never settle for dull", "Resist it", "Accept it with some spice", "Fairly accepting", "Calm is what's real"]),
]

COUPLE_DIMENSION_DETAILS = {
    "lifestyle": DimensionDetail("Step 1: Lifestyle", "Daily routines, cleanliness, leisure and social habits."),
    "finance": DimensionDetail("Step 2: Money & finance", "Spending, saving, investing and financial transparency."),
    "communication": DimensionDetail("Step 3: Communication & emotion", "Conflict handling, social needs, emotional expression and boundaries."),
    "intimacy": DimensionDetail("Step 4: Intimacy & family", "Closeness, children, families of origin and what makes you feel secure."),
    "values": DimensionDetail("Step 5: Core values", "Life goals, moral boundaries, appetite for risk and world view."),
}
