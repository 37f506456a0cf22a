"""
Dashboard statistics: collection totals, rating counters and the daily
question histogram of the last 30 days.
"""

from datetime import timedelta

from visakha_backend.api.models import StatsResponse, StatsTotals, TimelinePoint
from visakha_backend.database.daos.conversation_dao import ConversationDao
from visakha_backend.database.daos.message_dao import NEGATIVE_RATINGS, POSITIVE_RATINGS, MessageDao
from visakha_backend.database.daos.user_dao import UserDao
from visakha_backend.database.helpers.documents import utcnow
from visakha_backend.database.helpers.transactionManagement import transactional

TIMELINE_DAYS = 30


class StatsService:
    def __init__(self, store):
        self.store = store
        self.user_dao = UserDao()
        self.conversation_dao = ConversationDao()
        self.message_dao = MessageDao()

    @transactional
    def get_stats(self, session=None) -> StatsResponse:
        # Legacy numeric 0 ratings count as thumbs down.
        totals = StatsTotals(
            users=self.user_dao.countUsers(session),
            conversations=self.conversation_dao.countConversations(session),
            messages=self.message_dao.countMessages(session),
            thumbs_up=self.message_dao.countByRatings(session, POSITIVE_RATINGS),
            thumbs_down=self.message_dao.countByRatings(session, NEGATIVE_RATINGS),
        )
        since = utcnow() - timedelta(days=TIMELINE_DAYS)
        timeline = [
            TimelinePoint(date=day, count=count)
            for day, count in self.message_dao.fetchQuestionsTimeline(session, since)
        ]
        return StatsResponse(totals=totals, questions_timeline=timeline)
