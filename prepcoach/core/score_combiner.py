"""
Multimodal score combination.

Merges the content score with the overall video and audio signal scores
using fixed weights. The combined value replaces the evaluation's
top-level score; the content score is not kept separately.
"""

from prepcoach.models.evaluation import clamp_score

# (content, video, audio)
WEIGHTS_BOTH = (0.5, 0.25, 0.25)
WEIGHTS_SINGLE = (0.6, 0.4)


def combine_scores(
    content_score: int,
    video_overall: int | None = None,
    audio_overall: int | None = None,
) -> int:
    """
    Combine content and media scores into one bounded score.

    Args:
        content_score: Score from content evaluation (or the media-only base)
        video_overall: Overall video signal score, if a video was analysed
        audio_overall: Overall audio signal score, if audio was analysed

    Returns:
        Combined score in [0, 100]
    """
    if video_overall is not None and audio_overall is not None:
        content_weight, video_weight, audio_weight = WEIGHTS_BOTH
        combined = (
            content_score * content_weight
            + video_overall * video_weight
            + audio_overall * audio_weight
        )
    elif video_overall is not None:
        content_weight, media_weight = WEIGHTS_SINGLE
        combined = content_score * content_weight + video_overall * media_weight
    elif audio_overall is not None:
        content_weight, media_weight = WEIGHTS_SINGLE
        combined = content_score * content_weight + audio_overall * media_weight
    else:
        return clamp_score(content_score)

    return clamp_score(round(combined))
