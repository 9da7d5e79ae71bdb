from app.core.database import SessionLocal
from app.models import Course, CourseLevel


SAMPLE_COURSES = [
    {
        "title": "Full Stack Web Development",
        "description": "HTML, CSS, JavaScript, a backend framework and deployment, built around three projects.",
        "price": 999,
        "image": "https://images.example.com/courses/full-stack.jpg",
        "instructor": "Ananya Rao",
        "duration": "12 weeks",
        "level": CourseLevel.BEGINNER,
        "topics": ["HTML", "CSS", "JavaScript", "REST APIs", "Deployment"],
        "rating": 4.7,
        "featured": True,
    },
    {
        "title": "Data Structures and Algorithms",
        "description": "Interview-oriented problem solving with weekly timed practice sets.",
        "price": 1499,
        "image": "https://images.example.com/courses/dsa.jpg",
        "instructor": "Vikram Menon",
        "duration": "8 weeks",
        "level": CourseLevel.INTERMEDIATE,
        "topics": ["Arrays", "Graphs", "Dynamic Programming"],
        "rating": 4.8,
        "featured": False,
    },
]


def main():
    db = SessionLocal()
    try:
        for course in SAMPLE_COURSES:
            existing = db.query(Course).filter(Course.title == course["title"]).first()
            if not existing:
                db.add(Course(**course))
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
