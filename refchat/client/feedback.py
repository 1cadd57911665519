from typing import Dict, Literal, Optional


Vote = Literal["like", "dislike"]


class FeedbackTracker:
    """记录每条助手回答的点赞/点踩状态，仅保存在客户端。

    同一回答只能处于 like、dislike 或未评价之一；
    再次点击当前选项会取消评价。
    """

    def __init__(self):
        self._votes: Dict[str, Vote] = {}

    def vote(self, answer_id: str) -> Optional[Vote]:
        return self._votes.get(answer_id)

    def toggle(self, answer_id: str, vote: Vote) -> Optional[Vote]:
        if self._votes.get(answer_id) == vote:
            del self._votes[answer_id]
            return None
        self._votes[answer_id] = vote
        return vote

    def toggle_like(self, answer_id: str) -> Optional[Vote]:
        return self.toggle(answer_id, "like")

    def toggle_dislike(self, answer_id: str) -> Optional[Vote]:
        return self.toggle(answer_id, "dislike")
