"""
Built-in demo catalogue.

Served when the database has no subjects, lessons or quiz questions yet,
so a fresh deployment still has something to browse. Demo lesson ids
start with "demo"; they are read-only and never accrue progress.
"""

DEMO_PREFIX = "demo"


def is_demo_id(lesson_id: str) -> bool:
    return bool(lesson_id) and lesson_id.startswith(DEMO_PREFIX)


DEMO_SUBJECTS = [
    {"id": "dsa", "name": "Data Structures & Algorithms", "description": "Learn DSA concepts from basics to advanced", "icon": "code", "color": "blue", "orderIndex": 1},
    {"id": "math", "name": "Mathematics", "description": "Master mathematical concepts and problem solving", "icon": "calculator", "color": "green", "orderIndex": 2},
    {"id": "physics", "name": "Physics", "description": "Explore the laws of nature and physical phenomena", "icon": "atom", "color": "purple", "orderIndex": 3},
    {"id": "chemistry", "name": "Chemistry", "description": "Understand chemical reactions and molecular structures", "icon": "flask", "color": "orange", "orderIndex": 4},
    {"id": "programming", "name": "Programming", "description": "Learn various programming languages and paradigms", "icon": "terminal", "color": "teal", "orderIndex": 5},
]

DEMO_LESSON_CONTENT = """Data structures are fundamental concepts in computer science that enable efficient data organization and manipulation. They provide the foundation for designing algorithms and solving complex problems.

In this lesson, we'll explore:
- What are data structures and why they matter
- Classification of data structures (linear vs non-linear)
- Time and space complexity basics
- Common operations on data structures

Understanding data structures is crucial for:
1. Writing efficient code
2. Optimizing memory usage
3. Solving complex algorithmic problems
4. Acing technical interviews"""

DEMO_LESSONS = [
    {"id": "demo-1", "title": "Introduction to DSA", "difficultyLevel": "beginner", "tags": ["basics", "intro"], "orderIndex": 0},
    {"id": "demo-2", "title": "Arrays", "difficultyLevel": "beginner", "tags": ["linear", "basics"], "orderIndex": 1},
    {"id": "demo-3", "title": "Linked Lists", "difficultyLevel": "intermediate", "tags": ["linear", "pointers"], "orderIndex": 2},
    {"id": "demo-4", "title": "Stacks", "difficultyLevel": "beginner", "tags": ["linear", "LIFO"], "orderIndex": 3},
    {"id": "demo-5", "title": "Queues", "difficultyLevel": "beginner", "tags": ["linear", "FIFO"], "orderIndex": 4},
    {"id": "demo-6", "title": "Trees", "difficultyLevel": "intermediate", "tags": ["hierarchical", "recursion"], "orderIndex": 5},
    {"id": "demo-7", "title": "Binary Search Trees", "difficultyLevel": "intermediate", "tags": ["trees", "search"], "orderIndex": 6},
    {"id": "demo-8", "title": "Graph Algorithms", "difficultyLevel": "advanced", "tags": ["graphs", "traversal"], "orderIndex": 7},
]

# Shown to anonymous visitors on the lesson list
DEMO_PROGRESS = {
    "demo-1": 50,
    "demo-2": 75,
    "demo-3": 25,
}

DEMO_QUESTIONS = [
    {
        "id": "1",
        "questionText": "What is the time complexity of binary search?",
        "options": [
            {"label": "A", "text": "O(n)"},
            {"label": "B", "text": "O(log n)"},
            {"label": "C", "text": "O(n log n)"},
            {"label": "D", "text": "O(n²)"},
        ],
        "correctAnswer": "B",
    },
    {
        "id": "2",
        "questionText": "Which data structure uses LIFO principle?",
        "options": [
            {"label": "A", "text": "Queue"},
            {"label": "B", "text": "Stack"},
            {"label": "C", "text": "Array"},
            {"label": "D", "text": "Linked List"},
        ],
        "correctAnswer": "B",
    },
    {
        "id": "3",
        "questionText": "What is the space complexity of a linked list?",
        "options": [
            {"label": "A", "text": "O(1)"},
            {"label": "B", "text": "O(log n)"},
            {"label": "C", "text": "O(n)"},
            {"label": "D", "text": "O(n²)"},
        ],
        "correctAnswer": "C",
    },
    {
        "id": "4",
        "questionText": "Which sorting algorithm has the best average case time complexity?",
        "options": [
            {"label": "A", "text": "Bubble Sort - O(n²)"},
            {"label": "B", "text": "Quick Sort - O(n log n)"},
            {"label": "C", "text": "Insertion Sort - O(n²)"},
            {"label": "D", "text": "Selection Sort - O(n²)"},
        ],
        "correctAnswer": "B",
    },
]


def demo_lesson(lesson_id: str) -> dict:
    """Full demo lesson for an id; unknown demo ids get the intro lesson."""
    summary = next(
        (lesson for lesson in DEMO_LESSONS if lesson["id"] == lesson_id),
        DEMO_LESSONS[0],
    )
    return {
        **summary,
        "id": lesson_id,
        "subjectId": "dsa",
        "content": DEMO_LESSON_CONTENT,
        "videos": [],
        "isDemo": True,
    }
