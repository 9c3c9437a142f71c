"""HTTP API for Conversation API fulfillment."""
