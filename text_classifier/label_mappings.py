"""
Label mappings for the sentiment model.
Converts model predictions (0, 1) to human-readable labels.
"""

SENTIMENT_LABELS = {
    0: "Negative",
    1: "Positive"
}


def get_sentiment_description(prediction_id: int) -> str:
    descriptions = {
        0: "Negative - The text expresses a negative sentiment or opinion",
        1: "Positive - The text expresses a positive sentiment or opinion"
    }
    return descriptions.get(prediction_id, f"Unknown sentiment ID: {prediction_id}")
