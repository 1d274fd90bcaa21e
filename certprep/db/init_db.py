"""
Database initialization and seeding.
"""
import logging

from sqlalchemy.orm import Session

from certprep.models import Category, Question, QuestionOption, QuestionType, User

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Networking", "#3B82F6", "TCP/IP, subnetting, routing and switching"),
    ("Security", "#EF4444", "Threats, cryptography and access control"),
    ("Hardware", "#10B981", "Components, peripherals and troubleshooting"),
    ("Operating Systems", "#8B5CF6", "Windows, Linux and macOS administration"),
    ("Cloud Computing", "#F59E0B", "Service models, virtualization and deployment"),
]

SAMPLE_QUESTIONS = [
    {
        "category": "Networking",
        "question_text": "Which port does HTTPS use by default?",
        "difficulty": "easy",
        "points": 1.0,
        "options": [("80", False), ("443", True), ("22", False), ("8080", False)],
        "explanation": "HTTPS uses TCP port 443.",
    },
    {
        "category": "Networking",
        "question_text": "How many usable host addresses does a /26 subnet provide?",
        "difficulty": "medium",
        "points": 2.0,
        "options": [("62", True), ("64", False), ("30", False), ("126", False)],
        "explanation": "2^6 - 2 = 62 usable hosts.",
    },
    {
        "category": "Security",
        "question_text": "Which of the following is an asymmetric encryption algorithm?",
        "difficulty": "medium",
        "points": 2.0,
        "options": [("AES", False), ("RSA", True), ("3DES", False), ("RC4", False)],
        "explanation": "RSA uses a public/private key pair.",
    },
    {
        "category": "Operating Systems",
        "question_text": "Type the Linux command that lists files including hidden ones in long format.",
        "question_type": QuestionType.PERFORMANCE_BASED.value,
        "difficulty": "hard",
        "points": 3.0,
        "time_limit_seconds": 180,
        "options": [("ls -la", True), ("ls -al", True)],
        "explanation": "-l is long format, -a includes dotfiles.",
    },
]


def init_db(db: Session) -> None:
    """
    Initialize database with default data.

    Args:
        db: Database session
    """
    # Check if admin user exists
    admin = db.query(User).filter(User.email == "admin@example.com").first()
    if not admin:
        admin = User(
            email="admin@example.com",
            full_name="System Administrator",
            role="admin",
            is_active=True,
        )
        db.add(admin)
        logger.info("Admin user created")

    categories = {c.name: c for c in db.query(Category).all()}
    for name, color, description in DEFAULT_CATEGORIES:
        if name not in categories:
            categories[name] = Category(name=name, color=color, description=description)
            db.add(categories[name])
    db.flush()

    if db.query(Question).count() == 0:
        for item in SAMPLE_QUESTIONS:
            question = Question(
                category_id=categories[item["category"]].id,
                question_type=item.get("question_type", QuestionType.SINGLE_CHOICE.value),
                question_text=item["question_text"],
                explanation=item["explanation"],
                difficulty=item["difficulty"],
                points=item["points"],
                time_limit_seconds=item.get("time_limit_seconds", 60),
                is_active=True,
                options=[
                    QuestionOption(position=i, option_text=text, is_correct=correct)
                    for i, (text, correct) in enumerate(item["options"])
                ],
            )
            db.add(question)
        logger.info(f"Seeded {len(SAMPLE_QUESTIONS)} sample questions")

    db.commit()
