"""预置回答语料与首次启动时的种子会话。"""

from typing import List, Tuple
from uuid import uuid4

from refchat.domain.models import CannedAnswer, Message, Session, Table, utcnow_iso


def _answer(answer_id: str, text: str, columns: List[str], rows: List[dict], kind: str, **meta) -> CannedAnswer:
    return CannedAnswer(
        id=answer_id,
        answer_text=text,
        table=Table(columns=columns, rows=rows),
        metadata={"type": kind, **meta},
    )


DEFAULT_CORPUS: Tuple[CannedAnswer, ...] = (
    _answer(
        "answer-001",
        "Quarterly performance analysis shows revenue growth across all quarters. "
        "Q1 revenue ₹10L, Q2 ₹11L, Q3 ₹12L. Profit margins: Q1 ₹1L, Q2 ₹1.2L, Q3 ₹1.5L.",
        ["Company", "Q1 Revenue", "Q2 Revenue", "Q3 Revenue"],
        [
            {"Company": "Tech Solutions India", "Q1 Revenue": "₹10L", "Q2 Revenue": "₹11L", "Q3 Revenue": "₹12L"},
            {"Company": "Digital Services Pvt Ltd", "Q1 Revenue": "₹8L", "Q2 Revenue": "₹9L", "Q3 Revenue": "₹10L"},
            {"Company": "Innovation Hub", "Q1 Revenue": "₹12L", "Q2 Revenue": "₹13L", "Q3 Revenue": "₹14L"},
        ],
        "financial",
        source="survey",
    ),
    _answer(
        "answer-002",
        "Employee satisfaction survey results across IT companies. Overall satisfaction score: 78%. "
        "Key factors: work-life balance, salary, growth opportunities.",
        ["Company", "Satisfaction %", "Employees", "Rating"],
        [
            {"Company": "Infosys Hyderabad", "Satisfaction %": "82%", "Employees": "1,250", "Rating": "4.1/5"},
            {"Company": "TCS Vijayawada", "Satisfaction %": "79%", "Employees": "980", "Rating": "3.9/5"},
            {"Company": "Wipro Visakhapatnam", "Satisfaction %": "75%", "Employees": "650", "Rating": "3.8/5"},
        ],
        "survey",
    ),
    _answer(
        "answer-003",
        "Market share analysis for software companies in Andhra Pradesh. "
        "Top 3 companies hold 65% of the market. Growth rate: 12% YoY.",
        ["Company", "Market Share %", "Revenue (₹Cr)", "Growth %"],
        [
            {"Company": "TechCorp India", "Market Share %": "28%", "Revenue (₹Cr)": "₹45", "Growth %": "15%"},
            {"Company": "DataSoft Solutions", "Market Share %": "22%", "Revenue (₹Cr)": "₹38", "Growth %": "12%"},
            {"Company": "CloudTech Systems", "Market Share %": "15%", "Revenue (₹Cr)": "₹28", "Growth %": "10%"},
        ],
        "market",
    ),
    _answer(
        "answer-004",
        "Customer retention survey results. Average retention rate: 85%. "
        "Top performing companies show 90%+ retention. Primary reasons: service quality and pricing.",
        ["Company", "Retention %", "Customers", "Satisfaction"],
        [
            {"Company": "ServicePro Ltd", "Retention %": "92%", "Customers": "5,420", "Satisfaction": "4.5/5"},
            {"Company": "CustomerFirst Inc", "Retention %": "88%", "Customers": "3,850", "Satisfaction": "4.3/5"},
            {"Company": "Quality Services", "Retention %": "85%", "Customers": "2,960", "Satisfaction": "4.1/5"},
        ],
        "retention",
    ),
    _answer(
        "answer-005",
        "Productivity metrics across development teams. Average productivity index: 7.8/10. "
        "Teams using agile methodology show 15% higher productivity.",
        ["Company", "Productivity Index", "Team Size", "Projects"],
        [
            {"Company": "DevTech Solutions", "Productivity Index": "8.5/10", "Team Size": "45", "Projects": "12"},
            {"Company": "CodeWorks India", "Productivity Index": "8.0/10", "Team Size": "38", "Projects": "10"},
            {"Company": "Agile Systems", "Productivity Index": "7.5/10", "Team Size": "32", "Projects": "8"},
        ],
        "productivity",
    ),
    _answer(
        "answer-006",
        "Technology adoption survey in Andhra Pradesh companies. Cloud adoption: 68%, AI/ML: 42%, DevOps: 55%. "
        "Top adopters show 25% efficiency improvement.",
        ["Company", "Cloud %", "AI/ML %", "DevOps %"],
        [
            {"Company": "CloudFirst Technologies", "Cloud %": "95%", "AI/ML %": "78%", "DevOps %": "88%"},
            {"Company": "AI Innovations Pvt Ltd", "Cloud %": "82%", "AI/ML %": "92%", "DevOps %": "75%"},
            {"Company": "Modern Tech Solutions", "Cloud %": "75%", "AI/ML %": "65%", "DevOps %": "82%"},
        ],
        "technology",
    ),
)


_SEED_QUESTIONS = (
    ("Quarterly revenue analysis", "Show quarterly revenue analysis"),
    ("Employee satisfaction survey", "Employee satisfaction survey results"),
)


def seed_sessions() -> List[Session]:
    """生成首次启动（或文件损坏）时使用的种子会话。

    每次调用都会生成新的 sessionId 与当前时间戳。
    """

    sessions: List[Session] = []
    for i, (title, question) in enumerate(_SEED_QUESTIONS):
        now = utcnow_iso()
        sessions.append(
            Session(
                session_id=str(uuid4()),
                title=title,
                created_at=now,
                last_updated=now,
                messages=[
                    Message(role="user", text=question, timestamp=now),
                    DEFAULT_CORPUS[i].to_message(),
                ],
            )
        )
    return sessions
