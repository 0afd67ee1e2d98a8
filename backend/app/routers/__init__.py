from app.routers import admin, auth, chat, docs, documents, evaluation, health, leaderboard, quiz, update

__all__ = [
    "admin",
    "auth",
    "chat",
    "docs",
    "documents",
    "evaluation",
    "health",
    "leaderboard",
    "quiz",
    "update",
]
