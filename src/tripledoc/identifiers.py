"""
Subject identifier generation.

Identifiers start with the current time in milliseconds, so subjects added
later sort after subjects added earlier, followed by the digits of a random
fraction to keep collisions within a document unlikely. They are not meant
to be unguessable.
"""

import random
import time


def generate_identifier() -> str:
    """
    Generate a string that is likely to be unique within a document.

    Example: ``"1760862000123" + "8411764520384161"``
    """
    timestamp = str(int(time.time() * 1000))
    suffix = f"{random.random():.16f}"[len("0."):]
    return timestamp + suffix
