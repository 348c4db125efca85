"""keypath - keyframed vector path animation with Lottie export."""

__version__ = "0.1.0"
