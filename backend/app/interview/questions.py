import random
from dataclasses import asdict, dataclass


DIFFICULTIES = ["easy", "medium", "hard"]

DEFAULT_TIME_LIMITS_SEC = {
    "easy": 60,
    "medium": 90,
    "hard": 120,
}

CATEGORIES = {
    "technical": {
        "label": "Technical",
        "focus": "fundamentals, problem solving, and system design",
    },
    "behavioral": {
        "label": "Behavioral",
        "focus": "past experience framed with situation, task, action, and result",
    },
    "hr": {
        "label": "HR",
        "focus": "motivation, expectations, and culture fit",
    },
    "aptitude": {
        "label": "Aptitude",
        "focus": "estimation, logic, and quick reasoning",
    },
}


@dataclass(frozen=True)
class Question:
    id: str
    category: str
    difficulty: str
    text: str
    time_limit_sec: int

    def to_dict(self) -> dict:
        return asdict(self)


def _q(qid: str, category: str, difficulty: str, text: str, time_limit_sec: int | None = None) -> Question:
    return Question(
        id=qid,
        category=category,
        difficulty=difficulty,
        text=text,
        time_limit_sec=int(time_limit_sec or DEFAULT_TIME_LIMITS_SEC[difficulty]),
    )


# ---------- STATIC QUESTION BANK ----------

QUESTION_BANK: list[Question] = [
    _q("tech-e-1", "technical", "easy", "What is the difference between a process and a thread?"),
    _q("tech-e-2", "technical", "easy", "Explain what an index does in a relational database."),
    _q("tech-e-3", "technical", "easy", "What happens when you type a URL into a browser and press enter?"),
    _q("tech-e-4", "technical", "easy", "Compare a stack and a queue, with one use case for each."),
    _q("tech-m-1", "technical", "medium", "How would you detect a cycle in a linked list?"),
    _q("tech-m-2", "technical", "medium", "Explain how HTTP caching headers work."),
    _q("tech-m-3", "technical", "medium", "When would you pick a NoSQL store over a relational database?"),
    _q("tech-m-4", "technical", "medium", "Describe how you would debug a memory leak in a long-running service."),
    _q("tech-h-1", "technical", "hard", "Design a URL shortener that handles millions of requests per day."),
    _q("tech-h-2", "technical", "hard", "How would you implement rate limiting across a cluster of API servers?"),
    _q("tech-h-3", "technical", "hard", "Explain the trade-offs of the CAP theorem using a system you know.", 150),

    _q("beh-e-1", "behavioral", "easy", "Tell me about yourself."),
    _q("beh-e-2", "behavioral", "easy", "Describe a project you are proud of."),
    _q("beh-e-3", "behavioral", "easy", "How do you organise your work when you have several deadlines?"),
    _q("beh-m-1", "behavioral", "medium", "Tell me about a time you disagreed with a teammate and how you resolved it."),
    _q("beh-m-2", "behavioral", "medium", "Describe a mistake you made and what you learned from it."),
    _q("beh-m-3", "behavioral", "medium", "Tell me about a time you had to learn something quickly."),
    _q("beh-h-1", "behavioral", "hard", "Describe a situation where you led a team through a failing project."),
    _q("beh-h-2", "behavioral", "hard", "Tell me about a decision you made with incomplete information."),
    _q("beh-h-3", "behavioral", "hard", "Describe a time you had to push back on a manager or client."),

    _q("hr-e-1", "hr", "easy", "Why do you want to join our company?"),
    _q("hr-e-2", "hr", "easy", "What are your greatest strengths?"),
    _q("hr-e-3", "hr", "easy", "Where do you see yourself in three years?"),
    _q("hr-m-1", "hr", "medium", "What is your biggest weakness and how are you working on it?"),
    _q("hr-m-2", "hr", "medium", "Why should we hire you over other candidates?"),
    _q("hr-m-3", "hr", "medium", "Are you comfortable relocating or working in shifts?"),
    _q("hr-h-1", "hr", "hard", "You have two offers. How do you decide between them?"),
    _q("hr-h-2", "hr", "hard", "Tell me about a gap or a low grade on your record."),
    _q("hr-h-3", "hr", "hard", "What salary do you expect, and how did you arrive at that number?"),

    _q("apt-e-1", "aptitude", "easy", "A train travels 120 km in 2 hours. What is its average speed, and how did you get it?"),
    _q("apt-e-2", "aptitude", "easy", "If 5 pens cost 40, how much do 8 pens cost?"),
    _q("apt-e-3", "aptitude", "easy", "What is 15% of 240? Walk through your method."),
    _q("apt-m-1", "aptitude", "medium", "Estimate how many smartphones are sold in your country each year."),
    _q("apt-m-2", "aptitude", "medium", "Two pipes fill a tank in 6 and 8 hours. How long do they take together?"),
    _q("apt-m-3", "aptitude", "medium", "How many times a day do the hour and minute hands of a clock overlap?"),
    _q("apt-h-1", "aptitude", "hard", "You have 8 identical-looking balls, one heavier. Find it in two weighings."),
    _q("apt-h-2", "aptitude", "hard", "Estimate the number of piano tuners in a city of five million people."),
    _q("apt-h-3", "aptitude", "hard", "Three people check into a hotel room costing 30. Explain the missing rupee puzzle."),
]

_QUESTIONS_BY_ID = {item.id: item for item in QUESTION_BANK}


def normalize_category(category: str) -> str:
    normalized = str(category or "").strip().lower()
    if normalized not in CATEGORIES:
        raise ValueError(f"Unknown category: {category}")
    return normalized


def normalize_difficulty(difficulty: str) -> str:
    normalized = str(difficulty or "").strip().lower()
    if normalized not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty: {difficulty}")
    return normalized


def get_question(question_id: str) -> Question | None:
    return _QUESTIONS_BY_ID.get(str(question_id or ""))


def list_categories() -> list[dict]:
    items = []
    for key, meta in CATEGORIES.items():
        counts = {level: 0 for level in DIFFICULTIES}
        for question in QUESTION_BANK:
            if question.category == key:
                counts[question.difficulty] += 1
        items.append({
            "key": key,
            "label": meta["label"],
            "focus": meta["focus"],
            "question_counts": counts,
            "total_questions": sum(counts.values()),
        })
    return items


def select_questions(category: str, difficulty: str, count: int, rng: random.Random | None = None) -> list[Question]:
    category_key = normalize_category(category)
    difficulty_key = normalize_difficulty(difficulty)
    pool = [q for q in QUESTION_BANK if q.category == category_key and q.difficulty == difficulty_key]

    wanted = max(0, min(int(count), len(pool)))
    chooser = rng or random.Random()
    return chooser.sample(pool, wanted)
