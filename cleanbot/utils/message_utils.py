"""Message utilities for Discord delivery"""

DISCORD_MESSAGE_LIMIT = 2000


def smart_split_message(text: str, max_length: int = DISCORD_MESSAGE_LIMIT) -> list[str]:
    """Split text into Discord-sized chunks, preferring paragraph and line breaks"""
    if len(text) <= max_length:
        return [text]
    
    chunks = []
    remaining = text
    
    while len(remaining) > max_length:
        window = remaining[:max_length]
        split_point = max_length
        
        # Don't make chunks too small
        for separator in ('\n\n', '\n', ' '):
            position = window.rfind(separator)
            if position > max_length * 0.5:
                split_point = position + len(separator)
                break
        
        chunks.append(remaining[:split_point].rstrip())
        remaining = remaining[split_point:].lstrip()
    
    if remaining.strip():
        chunks.append(remaining.strip())
    
    return chunks


async def send_long_message(channel, text: str, max_length: int = DISCORD_MESSAGE_LIMIT):
    """Send a message that may exceed the Discord length limit"""
    for chunk in smart_split_message(text, max_length):
        await channel.send(chunk)
