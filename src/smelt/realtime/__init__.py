"""
Real-time progress delivery for smelts.

Contains the channel contract, an in-process hub, the server-side broadcaster,
client subscriptions and the client-side job state machine.
"""

from smelt.realtime.broadcast import SmeltBroadcaster
from smelt.realtime.channel import ChannelEvent, ChannelStatus, smelt_topic
from smelt.realtime.hub import LocalChannelHub
from smelt.realtime.job import SmeltJob
from smelt.realtime.subscription import (
    RetryingSubscription,
    SubscriptionCallbacks,
    SubscriptionHandle,
    SubscriptionState,
    subscribe_to_smelt,
    subscribe_with_retry,
)

__all__ = [
    "ChannelEvent",
    "ChannelStatus",
    "LocalChannelHub",
    "RetryingSubscription",
    "SmeltBroadcaster",
    "SmeltJob",
    "SubscriptionCallbacks",
    "SubscriptionHandle",
    "SubscriptionState",
    "smelt_topic",
    "subscribe_to_smelt",
    "subscribe_with_retry",
]
