"""표준 평가 양식 기본 질문 — Built-in question sets for the canonical forms.

POST /forms/defaults가 manager-form / employee-form을 이 내용으로 생성 또는 초기화합니다.
각 섹션은 평점 질문 4개와 서술형 질문 1개로 구성됩니다.
"""

from hrportal.models.form import EMPLOYEE_FORM_ID, MANAGER_FORM_ID

_RECOMMENDATION_OPTIONS: list[str] = ["Yes", "No", "Not yet, but potential", "Need more time to assess"]

# (섹션, [(질문 ID, 질문, 유형)])
_EMPLOYEE_SECTIONS: list[tuple[str, list[tuple[str, str, str]]]] = [
    ("Work Quality & Execution", [
        ("work_quality_1", "How would you rate the overall quality of this employee's work?", "rating"),
        ("work_quality_2", "Does the employee consistently meet deadlines and manage time effectively?", "rating"),
        ("work_quality_3", "How detail-oriented is the employee in their tasks and deliverables?", "rating"),
        ("work_quality_4", "How well does the employee follow project guidelines and instructions?", "rating"),
        ("work_quality_5", "Any specific example where the employee demonstrated exceptional quality?", "text"),
    ]),
    ("Collaboration & Communication", [
        ("collaboration_1", "How effectively does the employee communicate with peers and supervisors?", "rating"),
        ("collaboration_2", "Is the employee receptive to feedback and willing to make improvements?", "rating"),
        ("collaboration_3", "How well does the employee collaborate with team members on projects?", "rating"),
        ("collaboration_4", "Does the employee actively participate in team meetings and discussions?", "rating"),
        ("collaboration_5", "Any specific examples of effective collaboration or communication?", "text"),
    ]),
    ("Problem Solving & Innovation", [
        ("problem_solving_1", "How well does the employee identify and solve problems independently?", "rating"),
        ("problem_solving_2", "Does the employee suggest innovative solutions or process improvements?", "rating"),
        ("problem_solving_3", "How well does the employee adapt to new challenges and changes?", "rating"),
        ("problem_solving_4", "Does the employee take initiative in identifying areas for improvement?", "rating"),
        ("problem_solving_5", "Any specific examples of problem-solving or innovative thinking?", "text"),
    ]),
    ("Leadership & Growth", [
        ("leadership_1", "How well does the employee demonstrate leadership qualities?", "rating"),
        ("leadership_2", "Does the employee take responsibility for their actions and decisions?", "rating"),
        ("leadership_3", "How well does the employee mentor or support junior team members?", "rating"),
        ("leadership_4", "Does the employee actively seek opportunities for professional development?", "rating"),
        ("leadership_5", "Any specific examples of leadership or growth initiatives?", "text"),
    ]),
    ("Overall Assessment", [
        ("overall_1", "How would you rate the employee's overall performance this period?", "rating"),
        ("overall_2", "What are the employee's key strengths?", "text"),
        ("overall_3", "What areas does the employee need to improve?", "text"),
        ("overall_4", "What specific goals should the employee focus on for the next period?", "text"),
        ("overall_5", "Would you recommend this employee for promotion or advancement?", "multiple-choice"),
    ]),
]

_MANAGER_SECTIONS: list[tuple[str, list[tuple[str, str, str]]]] = [
    ("Leadership & Management", [
        ("leadership_1", "How effectively does the manager lead and motivate their team?", "rating"),
        ("leadership_2", "Does the manager provide clear direction and set appropriate goals?", "rating"),
        ("leadership_3", "How well does the manager delegate tasks and responsibilities?", "rating"),
        ("leadership_4", "Does the manager create a positive and productive work environment?", "rating"),
        ("leadership_5", "Any specific examples of effective leadership or management?", "text"),
    ]),
    ("Communication & Feedback", [
        ("communication_1", "How effectively does the manager communicate with team members?", "rating"),
        ("communication_2", "Does the manager provide regular and constructive feedback?", "rating"),
        ("communication_3", "How well does the manager handle conflicts and difficult situations?", "rating"),
        ("communication_4", "Does the manager actively listen to team concerns and suggestions?", "rating"),
        ("communication_5", "Any specific examples of effective communication or feedback?", "text"),
    ]),
    ("Strategic Thinking & Planning", [
        ("strategic_1", "How well does the manager think strategically and plan for the future?", "rating"),
        ("strategic_2", "Does the manager identify and address potential challenges proactively?", "rating"),
        ("strategic_3", "How well does the manager align team goals with organizational objectives?", "rating"),
        ("strategic_4", "Does the manager make data-driven decisions and use resources effectively?", "rating"),
        ("strategic_5", "Any specific examples of strategic thinking or planning?", "text"),
    ]),
    ("Team Development & Performance", [
        ("team_dev_1", "How well does the manager develop and mentor team members?", "rating"),
        ("team_dev_2", "Does the manager recognize and reward good performance?", "rating"),
        ("team_dev_3", "How well does the manager manage team performance and productivity?", "rating"),
        ("team_dev_4", "Does the manager create opportunities for team growth and learning?", "rating"),
        ("team_dev_5", "Any specific examples of team development or performance management?", "text"),
    ]),
    ("Overall Assessment", [
        ("overall_1", "How would you rate the manager's overall effectiveness?", "rating"),
        ("overall_2", "What are the manager's key strengths?", "text"),
        ("overall_3", "What areas does the manager need to improve?", "text"),
        ("overall_4", "What specific goals should the manager focus on for the next period?", "text"),
        ("overall_5", "Would you recommend this manager for advancement or additional responsibilities?", "multiple-choice"),
    ]),
]


def _build(sections: list[tuple[str, list[tuple[str, str, str]]]]) -> list[dict]:
    questions: list[dict] = []
    for section, items in sections:
        for question_id, label, question_type in items:
            question: dict = {"id": question_id, "label": label, "type": question_type, "section": section}
            if question_type == "multiple-choice":
                question["options"] = list(_RECOMMENDATION_OPTIONS)
            questions.append(question)
    return questions


DEFAULT_FORMS: dict[str, dict] = {
    MANAGER_FORM_ID: {
        "title": "Manager Assessment Form",
        "description": "Comprehensive evaluation form for manager performance and leadership",
        "questions": _build(_MANAGER_SECTIONS),
    },
    EMPLOYEE_FORM_ID: {
        "title": "Employee Performance Form",
        "description": "Comprehensive evaluation form for employee performance and development",
        "questions": _build(_EMPLOYEE_SECTIONS),
    },
}
