"""
Review queue: a uniform random shuffle of the deck, no scheduling.
"""

import random


def build_review_queue(cards, rng=None):
    queue = list(cards)
    (rng or random).shuffle(queue)
    return queue
