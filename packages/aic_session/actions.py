from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class StartInterview(BaseModel):
    type: Literal["start_interview"] = "start_interview"
    job_description: str


class GoToQuestion(BaseModel):
    type: Literal["go_to_question"] = "go_to_question"
    index: int


class NextQuestion(BaseModel):
    type: Literal["next_question"] = "next_question"


class PreviousQuestion(BaseModel):
    type: Literal["previous_question"] = "previous_question"


class EditAnswer(BaseModel):
    type: Literal["edit_answer"] = "edit_answer"
    text: str


class StartRecording(BaseModel):
    type: Literal["start_recording"] = "start_recording"


class StopRecording(BaseModel):
    type: Literal["stop_recording"] = "stop_recording"


class ResetRecording(BaseModel):
    type: Literal["reset_recording"] = "reset_recording"


class SubmitAnswer(BaseModel):
    type: Literal["submit_answer"] = "submit_answer"


class FinishInterview(BaseModel):
    type: Literal["finish_interview"] = "finish_interview"


class StartNewInterview(BaseModel):
    type: Literal["start_new_interview"] = "start_new_interview"


SessionAction = Annotated[
    Union[
        StartInterview,
        GoToQuestion,
        NextQuestion,
        PreviousQuestion,
        EditAnswer,
        StartRecording,
        StopRecording,
        ResetRecording,
        SubmitAnswer,
        FinishInterview,
        StartNewInterview,
    ],
    Field(discriminator="type"),
]
