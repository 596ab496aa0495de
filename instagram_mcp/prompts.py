"""Prompt templates. Each prompt renders an instruction block from string arguments."""
from __future__ import annotations

from typing import Optional

from pydantic import Field

from .registry import CallKind, HandlerRegistry
from .schema import ArgumentSchema


class GreetingArgs(ArgumentSchema):
    name: str = Field(description="Name to greet")


def greeting(args: GreetingArgs) -> str:
    return f"Hello, {args.name}! How can I help you today?"


class CodeGeneratorArgs(ArgumentSchema):
    language: str = Field(description="Programming language")
    functionality: str = Field(description="Description of the functionality needed")
    style: Optional[str] = Field(default=None, description="Coding style or framework preferences")


def code_generator(args: CodeGeneratorArgs) -> str:
    prompt = f"Generate {args.language} code that {args.functionality}."
    if args.style:
        prompt += f" Follow {args.style} coding conventions and best practices."
    prompt += f"""

Requirements:
- Write clean, readable code
- Include appropriate comments
- Handle edge cases and errors
- Follow {args.language} best practices
- Provide usage examples if applicable

Please generate the code and explain how it works."""
    return prompt


class TechDocumentationArgs(ArgumentSchema):
    type: str = Field(description="Type of documentation (API, user guide, README, etc.)")
    project_name: str = Field(description="Name of the project")
    description: str = Field(description="Brief description of the project")
    audience: Optional[str] = Field(default=None, description="Target audience (developers, end-users, etc.)")


def tech_documentation(args: TechDocumentationArgs) -> str:
    audience = args.audience or "developers"
    return f"""Create comprehensive {args.type} documentation for "{args.project_name}".

Project Description: {args.description}
Target Audience: {audience}

Please include:
- Clear and concise explanations
- Step-by-step instructions where applicable
- Code examples and usage patterns
- Common troubleshooting scenarios
- Prerequisites and setup requirements
- Best practices and recommendations

Structure the documentation in a logical, easy-to-follow format that would be helpful for {audience}."""


class DataAnalysisArgs(ArgumentSchema):
    data_type: str = Field(description="Type of data to analyze")
    analysis_goal: str = Field(description="What insights or conclusions are needed")
    format: Optional[str] = Field(default=None, description="Preferred output format (report, charts, summary, etc.)")


def data_analysis(args: DataAnalysisArgs) -> str:
    output_format = args.format or "detailed report"
    return f"""Analyze {args.data_type} data to {args.analysis_goal}.

Please provide:
- Data exploration and initial observations
- Key patterns, trends, and anomalies
- Statistical insights and metrics
- Actionable recommendations
- Visual representations where helpful
- Limitations and assumptions

Format the analysis as a {output_format} that clearly communicates findings and their implications."""


class CreativeWritingArgs(ArgumentSchema):
    genre: str = Field(description="Genre of writing (story, poem, script, etc.)")
    theme: str = Field(description="Central theme or topic")
    tone: Optional[str] = Field(default=None, description="Desired tone (serious, humorous, mysterious, etc.)")
    length: Optional[str] = Field(default=None, description="Approximate length (short, medium, long)")


def creative_writing(args: CreativeWritingArgs) -> str:
    tone = args.tone or "engaging"
    length = args.length or "medium"
    return f"""Write a {length} {args.genre} with a {tone} tone, centered around the theme of "{args.theme}".

Creative guidelines:
- Develop compelling characters or elements
- Create an engaging narrative structure
- Use vivid descriptions and imagery
- Incorporate the theme naturally throughout
- Maintain consistency in tone and style
- End with a satisfying conclusion

Focus on creating original, creative content that captures the reader's attention and effectively explores the given theme."""


class ProblemSolverArgs(ArgumentSchema):
    problem: str = Field(description="Description of the problem to solve")
    context: Optional[str] = Field(default=None, description="Additional context or constraints")
    approach: Optional[str] = Field(default=None, description="Preferred problem-solving approach")


PROBLEM_SOLVER_STRUCTURE = """

Please provide a structured solution that includes:

1. **Problem Analysis**
   - Break down the problem into components
   - Identify key challenges and constraints
   - Clarify assumptions

2. **Solution Strategy**
   - Outline your approach
   - Consider alternative solutions
   - Explain your reasoning

3. **Implementation Plan**
   - Step-by-step action items
   - Required resources or tools
   - Timeline considerations

4. **Risk Assessment**
   - Potential obstacles
   - Mitigation strategies
   - Contingency plans

5. **Success Metrics**
   - How to measure solution effectiveness
   - Key performance indicators"""


def problem_solver(args: ProblemSolverArgs) -> str:
    prompt = f"Analyze and solve the following problem: {args.problem}"
    if args.context:
        prompt += f"\n\nContext and Constraints: {args.context}"
    if args.approach:
        prompt += f"\n\nPreferred Approach: {args.approach}"
    return prompt + PROBLEM_SOLVER_STRUCTURE


class ExplainConceptArgs(ArgumentSchema):
    concept: str = Field(description="The concept to explain")
    level: str = Field(description="Complexity level (beginner, intermediate, advanced)")
    context: Optional[str] = Field(default=None, description="Domain or field context")


def explain_concept(args: ExplainConceptArgs) -> str:
    domain = f" in the context of {args.context}" if args.context else ""
    return f"""Explain "{args.concept}"{domain} for someone at a {args.level} level.

Structure your explanation to include:

1. **Simple Definition**
   - Clear, jargon-free explanation
   - Core essence of the concept

2. **Key Components**
   - Break down into main parts
   - How components relate to each other

3. **Real-World Examples**
   - Practical applications
   - Relatable analogies or metaphors

4. **Common Misconceptions**
   - What people often get wrong
   - Clarify confusing aspects

5. **Next Steps**
   - Related concepts to explore
   - Resources for deeper learning

Adjust the complexity and depth based on the {args.level} level, ensuring the explanation is accessible yet comprehensive."""


class ReviewFeedbackArgs(ArgumentSchema):
    content_type: str = Field(description="Type of content to review (code, document, design, etc.)")
    focus_areas: Optional[str] = Field(default=None, description="Specific areas to focus on during review")
    criteria: Optional[str] = Field(default=None, description="Evaluation criteria or standards")


def review_feedback(args: ReviewFeedbackArgs) -> str:
    prompt = f"Please review the following {args.content_type} and provide constructive feedback."
    if args.focus_areas:
        prompt += f"\n\nFocus Areas: {args.focus_areas}"
    if args.criteria:
        prompt += f"\n\nEvaluation Criteria: {args.criteria}"
    prompt += f"""

Please structure your review as follows:

1. **Overall Assessment**
   - General strengths and weaknesses
   - Key observations

2. **Detailed Feedback**
   - Specific issues and suggestions
   - Line-by-line or section-by-section comments where applicable

3. **Strengths to Maintain**
   - What's working well
   - Best practices being followed

4. **Areas for Improvement**
   - Priority issues to address
   - Specific recommendations

5. **Action Items**
   - Concrete steps for improvement
   - Suggested next actions

Provide feedback that is constructive, specific, and actionable to help improve the quality of the {args.content_type}."""
    return prompt


PROMPTS = (
    ("greeting", GreetingArgs, greeting, "A simple greeting prompt"),
    ("code_generator", CodeGeneratorArgs, code_generator, "Generate code based on requirements"),
    ("tech_documentation", TechDocumentationArgs, tech_documentation, "Generate technical documentation"),
    ("data_analysis", DataAnalysisArgs, data_analysis, "Analyze data and provide insights"),
    ("creative_writing", CreativeWritingArgs, creative_writing, "Generate creative content"),
    ("problem_solver", ProblemSolverArgs, problem_solver, "Structured approach to problem solving"),
    ("explain_concept", ExplainConceptArgs, explain_concept, "Explain complex concepts clearly"),
    ("review_feedback", ReviewFeedbackArgs, review_feedback, "Provide structured review and feedback"),
)


def register_prompts(registry: HandlerRegistry) -> None:
    for name, schema, handler, description in PROMPTS:
        registry.register(CallKind.PROMPT, name, schema, handler, description)
