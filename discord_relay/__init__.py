"""
Discord Relay

Relays Discord messages to Telegram chats or a Discord webhook, and analyzes
trading signals posted to a Telegram feedback chat.
"""
