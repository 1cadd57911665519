"""Minimal demonstration against a running server (refchat-server)."""

from refchat.client import ChatApiClient, SessionCache
from refchat.client.table_view import format_table
from refchat.config.settings import settings

if __name__ == "__main__":
    api = ChatApiClient(settings)
    cache = SessionCache(api)
    session_id = api.create_chat()["sessionId"]
    cache.open(session_id)
    for question in ["Show quarterly revenue analysis", "Employee satisfaction survey results"]:
        cache.send(question)
        reply = cache.messages[-1]
        print("User:", question)
        print("Assistant:", reply.text)
        print(format_table(reply.table))
