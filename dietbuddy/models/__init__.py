# dietbuddy/models/__init__.py
from .user import User
from .activity import ActivityEntry
from .reward import RewardAccount, RewardActivity
from .catalog import Workout, Meal
from .progress import WorkoutLog, MealLog, BodyMeasurement
from .journey import JourneyRecord
from .social import Post, PostComment, PostLike, ProgressPhoto, PhotoLike
from .blog import Blog
from .payment import Payment

__all__ = [
    "User",
    "ActivityEntry",
    "RewardAccount",
    "RewardActivity",
    "Workout",
    "Meal",
    "WorkoutLog",
    "MealLog",
    "BodyMeasurement",
    "JourneyRecord",
    "Post",
    "PostComment",
    "PostLike",
    "ProgressPhoto",
    "PhotoLike",
    "Blog",
    "Payment",
]
