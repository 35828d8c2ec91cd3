"""Content store collection names shared by the wellness features."""

GRATITUDE = "gratitude_entries"
MOODS = "mood_entries"
AFFIRMATIONS = "affirmations"
COMMENTS = "comments"

# Field on a comment record naming the post it belongs to
COMMENT_POST_FIELD = {
    AFFIRMATIONS: "affirmation_id",
    GRATITUDE: "gratitude_id",
}
