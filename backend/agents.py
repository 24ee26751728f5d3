import copy
import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field, field_validator

from config import get_settings

logger = structlog.get_logger(__name__)

MAX_TIMELINE_TASKS = 7
MAX_RESOURCES = 4

FALLBACK_TIMELINE = {
    "tasks": [
        {
            "title": "Create an action plan",
            "description": "Break down your dream into smaller, achievable goals.",
            "status": "To-Do",
            "priority": "High",
            "dueDate": None,
        }
    ],
    "nextAction": "Start by creating an action plan for your dream",
    "aiConfidence": 65,
}

FALLBACK_RESOURCES = [
    {
        "title": "How to Set Effective Goals",
        "description": "A comprehensive guide to setting achievable and measurable goals",
        "type": "article",
        "url": "https://www.mindtools.com/pages/article/newHTE_90.htm",
        "isVerified": True,
        "isFree": True,
        "readTime": 8,
        "duration": None,
    }
]

FALLBACK_PROGRESS_ACTION = "Continue working on your tasks in order of priority"
FALLBACK_PROGRESS_CONFIDENCE = 60


class AdvisoryServiceError(Exception):
    """The completion service answered with something unusable"""


def _clamp_percent(v):
    return max(0, min(100, int(round(float(v)))))


class SuggestedTask(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: str = "To-Do"
    priority: str = "Medium"
    dueDate: Optional[str] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return v if v in ("To-Do", "Doing", "Done") else "To-Do"

    @field_validator('priority')
    @classmethod
    def validate_priority(cls, v):
        return v if v in ("Low", "Medium", "High") else "Medium"

    @field_validator('dueDate', mode='before')
    @classmethod
    def validate_due_date(cls, v):
        # Unparseable suggestions are dropped rather than failing the timeline
        if not v:
            return None
        try:
            datetime.fromisoformat(str(v))
        except ValueError:
            return None
        return str(v)


class TimelineSuggestion(BaseModel):
    tasks: List[SuggestedTask] = Field(min_length=1)
    nextAction: str = "Start planning your first steps"
    aiConfidence: int = 75

    @field_validator('tasks')
    @classmethod
    def limit_tasks(cls, v):
        return v[:MAX_TIMELINE_TASKS]

    @field_validator('aiConfidence', mode='before')
    @classmethod
    def clamp_confidence(cls, v):
        return 75 if v is None else _clamp_percent(v)

    @field_validator('nextAction', mode='before')
    @classmethod
    def default_next_action(cls, v):
        return v or "Start planning your first steps"


class SuggestedResource(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    type: str
    url: str = Field(min_length=1)
    isVerified: bool = False
    isFree: bool = True
    readTime: Optional[int] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, ge=0)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        if v not in ("article", "video", "tool"):
            raise ValueError("type must be article, video or tool")
        return v


class ProgressAnalysis(BaseModel):
    progressPercentage: int = 0
    nextAction: str = "Continue working on your current tasks"
    aiConfidence: int = 70

    @field_validator('progressPercentage', mode='before')
    @classmethod
    def clamp_progress(cls, v):
        return 0 if v is None else _clamp_percent(v)

    @field_validator('aiConfidence', mode='before')
    @classmethod
    def clamp_confidence(cls, v):
        return 70 if v is None else _clamp_percent(v)

    @field_validator('nextAction', mode='before')
    @classmethod
    def default_next_action(cls, v):
        return v or "Continue working on your current tasks"


def parse_json_content(content: str) -> Any:
    """Strip optional markdown fences and decode the model's JSON answer"""
    content = (content or "").strip()
    if content.startswith('```json'):
        content = content[7:]
    elif content.startswith('```'):
        content = content[3:]
    if content.endswith('```'):
        content = content[:-3]
    content = content.strip()
    if not content:
        raise AdvisoryServiceError("Empty response from completion service")
    return json.loads(content)


def progress_from_tasks(tasks: List[Dict[str, Any]]) -> int:
    if not tasks:
        return 0
    done = sum(1 for task in tasks if task.get("status") == "Done")
    return round(100 * done / len(tasks))


class DreamAdvisorAgent:
    def __init__(self, llm=None):
        settings = get_settings()
        self.llm = llm
        if self.llm is None and settings.openai_api_key:
            try:
                self.llm = ChatOpenAI(
                    model=settings.openai_model,
                    api_key=settings.openai_api_key,
                    temperature=settings.openai_temperature,
                    max_tokens=settings.openai_max_tokens,
                )
            except Exception as e:
                logger.warning("Failed to initialize OpenAI client", error=str(e))
                self.llm = None
        if self.llm is None:
            logger.warning("No completion model configured, advisory calls will use fallbacks")

    async def _complete(self, prompt: ChatPromptTemplate, variables: Dict[str, Any]) -> Any:
        if self.llm is None:
            raise AdvisoryServiceError("Completion service not configured")
        chain = prompt | self.llm
        response = await chain.ainvoke(variables)
        content = getattr(response, "content", response)
        return parse_json_content(content)

    async def generate_timeline(self, title: str, description: Optional[str] = None) -> Dict[str, Any]:
        """Suggest 5-7 milestone tasks, a next action and a confidence score for a dream"""
        prompt = ChatPromptTemplate.from_messages([
            ("system", "You are an expert life coach and project planner who specializes in breaking down dreams and goals into actionable steps."),
            ("human", """Create an actionable timeline for this dream: "{title}"
{context}

Respond with JSON in the following format:
{{
  "tasks": [
    {{
      "title": "Task name",
      "description": "Brief description of what needs to be done",
      "status": "To-Do",
      "priority": "Low" or "Medium" or "High",
      "dueDate": "YYYY-MM-DD" (optional, relative to today: {today})
    }}
  ],
  "nextAction": "The most important next action to take",
  "aiConfidence": a number between 0 and 100 representing confidence in the timeline
}}

Create 5-7 tasks that represent milestones toward achieving this dream. Organize them in a logical sequence.""")
        ])
        try:
            raw = await self._complete(prompt, {
                "title": title,
                "context": f"Additional context: {description}" if description else "",
                "today": datetime.now().strftime("%Y-%m-%d"),
            })
            suggestion = TimelineSuggestion.model_validate(raw)
            logger.info("Timeline generated", title=title, task_count=len(suggestion.tasks))
            return suggestion.model_dump()
        except Exception as e:
            logger.error("Error generating timeline", title=title, error=str(e))
            return copy.deepcopy(FALLBACK_TIMELINE)

    async def generate_resources(self, title: str, tasks: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Recommend 2-4 articles, videos or tools for a dream"""
        prompt = ChatPromptTemplate.from_messages([
            ("system", "You are a research expert who finds the most relevant and helpful resources for any goal or project."),
            ("human", """Suggest helpful resources for achieving this dream: "{title}"
{tasks}

Respond with JSON in the following format:
{{
  "resources": [
    {{
      "title": "Resource title",
      "description": "Brief description of the resource",
      "type": "article" or "video" or "tool",
      "url": "https://example.com" (use real websites that exist),
      "isVerified": boolean indicating if this is from a trusted source,
      "isFree": boolean indicating if this is free or paid,
      "readTime": for articles, estimated reading time in minutes (optional),
      "duration": for videos, duration in minutes (optional)
    }}
  ]
}}

Provide 2-4 relevant resources that would help with this dream. Use real websites and resources.""")
        ])
        try:
            raw = await self._complete(prompt, {
                "title": title,
                "tasks": f"Related tasks: {json.dumps(tasks, default=str)}" if tasks else "",
            })
            if isinstance(raw, dict):
                raw = raw.get("resources")
            if not isinstance(raw, list) or not raw:
                raise AdvisoryServiceError("Expected a non-empty list of resources")
            resources = [SuggestedResource.model_validate(item).model_dump() for item in raw[:MAX_RESOURCES]]
            logger.info("Resources generated", title=title, resource_count=len(resources))
            return resources
        except Exception as e:
            logger.error("Error generating resources", title=title, error=str(e))
            return copy.deepcopy(FALLBACK_RESOURCES)

    async def analyze_dream_progress(self, title: str, tasks: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Estimate progress and the next action from the current task list"""
        prompt = ChatPromptTemplate.from_messages([
            ("system", "You are an expert analytics coach who specializes in tracking progress and providing helpful advice for achieving goals."),
            ("human", """Analyze progress on this dream: "{title}"
These are the current tasks and their status:
{tasks}

Respond with JSON in the following format:
{{
  "progressPercentage": a number between 0 and 100 representing overall progress,
  "nextAction": "The most important next action to take based on current progress",
  "aiConfidence": a number between 0 and 100 representing confidence in this analysis
}}""")
        ])
        try:
            raw = await self._complete(prompt, {
                "title": title,
                "tasks": json.dumps(tasks, default=str),
            })
            analysis = ProgressAnalysis.model_validate(raw)
            logger.info("Progress analyzed", title=title, progress=analysis.progressPercentage)
            return analysis.model_dump()
        except Exception as e:
            logger.error("Error analyzing dream progress", title=title, error=str(e))
            return {
                "progressPercentage": progress_from_tasks(tasks),
                "nextAction": FALLBACK_PROGRESS_ACTION,
                "aiConfidence": FALLBACK_PROGRESS_CONFIDENCE,
            }


dream_advisor = DreamAdvisorAgent()
