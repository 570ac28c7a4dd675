from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class VideoData:
    id: str
    title: str
    description: str
    # nominal length from the catalog; the player reports the authoritative one
    duration: float
    thumbnail_url: str
    video_url: str


SAMPLE_VIDEOS: List[VideoData] = [
    VideoData(
        id='video-1',
        title='Introduction to React Hooks',
        description='Learn the basics of React Hooks and how they can simplify your code.',
        duration=365,
        thumbnail_url='https://images.unsplash.com/photo-1633356122544-f134324a6cee?q=80&w=1470&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-5s.mp4',
    ),
    VideoData(
        id='video-2',
        title='Advanced TypeScript Patterns',
        description='Explore advanced TypeScript patterns for building robust applications.',
        duration=721,
        thumbnail_url='https://images.unsplash.com/photo-1555066931-4365d14bab8c?q=80&w=1470&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-10s.mp4',
    ),
    VideoData(
        id='video-3',
        title='Mastering Tailwind CSS',
        description='Master the utility-first CSS framework to build modern interfaces quickly.',
        duration=548,
        thumbnail_url='https://images.unsplash.com/photo-1587620962725-abab7fe55159?q=80&w=1631&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-15s.mp4',
    ),
    VideoData(
        id='video-4',
        title='Building APIs with Node.js',
        description='Learn how to build robust and scalable APIs using Node.js and Express.',
        duration=832,
        thumbnail_url='https://images.unsplash.com/photo-1629904853716-f0bc54eea481?q=80&w=1470&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-20s.mp4',
    ),
    VideoData(
        id='video-5',
        title='State Management with Zustand',
        description='Simplify your state management with the lightweight Zustand library.',
        duration=478,
        thumbnail_url='https://images.unsplash.com/photo-1661961112835-ca6f5811d2af?q=80&w=1472&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-30s.mp4',
    ),
    VideoData(
        id='video-6',
        title='Full-Stack Authentication',
        description='Implement secure authentication across your full-stack application.',
        duration=952,
        thumbnail_url='https://images.unsplash.com/photo-1580894732444-8ecded7900cd?q=80&w=1470&auto=format&fit=crop',
        video_url='https://samplelib.com/lib/preview/mp4/sample-5s.mp4',
    ),
]


def find_video(video_id: str, videos: List[VideoData] | None = None) -> Optional[int]:
    """Index of ``video_id`` in the catalog, or None."""
    for idx, video in enumerate(videos if videos is not None else SAMPLE_VIDEOS):
        if video.id == video_id:
            return idx
    return None


def neighbours(index: int, videos: List[VideoData] | None = None) -> tuple[Optional[str], Optional[str]]:
    """Ids of the previous and next lecture around ``index``."""
    items = videos if videos is not None else SAMPLE_VIDEOS
    previous_id = items[index - 1].id if index > 0 else None
    next_id = items[index + 1].id if index < len(items) - 1 else None
    return previous_id, next_id
