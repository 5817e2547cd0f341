from innkeeper.services.guest.guest_stats_service import GuestStatsService

__all__ = ["GuestStatsService"]
