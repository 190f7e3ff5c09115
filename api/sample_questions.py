"""
api/sample_questions.py — bundled JEE sample test (questions, key, solutions)

Same JSON shapes as the upload endpoints, so it goes through the normal
ingestion validators.
"""

SAMPLE_QUESTIONS = [
    {
        "questionNumber": 1,
        "question": "A body starts from rest and moves with uniform acceleration 2 m/s^2. "
                    "Distance covered in the first 5 s is:",
        "optionA": "10 m",
        "optionB": "20 m",
        "optionC": "25 m",
        "optionD": "50 m",
        "subject": "Physics",
        "topic": "Mechanics",
    },
    {
        "questionNumber": 2,
        "question": "The focal length of a concave mirror with radius of curvature 40 cm is:",
        "optionA": "10 cm",
        "optionB": "20 cm",
        "optionC": "40 cm",
        "optionD": "80 cm",
        "subject": "Physics",
        "topic": "Optics",
    },
    {
        "questionNumber": 3,
        "question": "Which of the following has the highest first ionisation enthalpy?",
        "optionA": "Na",
        "optionB": "Mg",
        "optionC": "N",
        "optionD": "O",
        "subject": "Chemistry",
        "topic": "Atomic Structure",
    },
    {
        "questionNumber": 4,
        "question": "The hybridisation of carbon in ethyne (C2H2) is:",
        "optionA": "sp",
        "optionB": "sp2",
        "optionC": "sp3",
        "optionD": "sp3d",
        "subject": "Chemistry",
        "topic": "Chemical Bonding",
    },
    {
        "questionNumber": 5,
        "question": "The derivative of x^2 sin x with respect to x is:",
        "optionA": "2x sin x",
        "optionB": "x^2 cos x",
        "optionC": "2x sin x + x^2 cos x",
        "optionD": "2x cos x + x^2 sin x",
        "subject": "Mathematics",
        "topic": "Calculus",
    },
    {
        "questionNumber": 6,
        "question": "Two fair dice are thrown. The probability that the sum is 7 is:",
        "optionA": "1/6",
        "optionB": "1/12",
        "optionC": "5/36",
        "optionD": "7/36",
        "subject": "Mathematics",
        "topic": "Probability and Statistics",
    },
]

SAMPLE_ANSWER_KEY = {
    "1": "C",
    "2": "B",
    "3": "C",
    "4": "A",
    "5": "C",
    "6": "A",
}

SAMPLE_SOLUTIONS = [
    {
        "questionNumber": 1,
        "detailedSolution": "s = ut + (1/2)at^2 = 0 + (1/2)(2)(5^2) = 25 m.",
        "correctOption": "C",
        "finalAnswer": "25 m",
    },
    {
        "questionNumber": 2,
        "detailedSolution": "For a spherical mirror f = R/2 = 40/2 = 20 cm.",
        "correctOption": "B",
        "finalAnswer": "20 cm",
    },
    {
        "questionNumber": 3,
        "detailedSolution": "N has a half-filled 2p subshell, which is extra stable, "
                            "so its ionisation enthalpy exceeds that of O. Na and Mg are far lower.",
        "correctOption": "C",
        "finalAnswer": "N",
    },
    {
        "questionNumber": 4,
        "detailedSolution": "Each carbon forms one sigma bond to H and one to C plus two pi bonds: "
                            "two electron domains, so sp.",
        "correctOption": "A",
        "finalAnswer": "sp",
    },
    {
        "questionNumber": 5,
        "detailedSolution": "Product rule: d/dx(x^2) sin x + x^2 d/dx(sin x) = 2x sin x + x^2 cos x.",
        "correctOption": "C",
        "finalAnswer": "2x sin x + x^2 cos x",
    },
    {
        "questionNumber": 6,
        "detailedSolution": "Favourable outcomes (1,6),(2,5),(3,4),(4,3),(5,2),(6,1) = 6 of 36.",
        "correctOption": "A",
        "finalAnswer": "1/6",
    },
]
