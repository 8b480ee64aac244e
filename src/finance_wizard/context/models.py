"""User context models used to personalise advice."""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class PersonalInfo(BaseModel):
    name: Optional[str] = None
    age: Optional[int] = None
    location: Optional[str] = None
    occupation: Optional[str] = None


class FamilyInfo(BaseModel):
    marital_status: Optional[Literal["single", "married", "divorced", "widowed"]] = None
    children: Optional[int] = None
    dependents: List[str] = Field(default_factory=list)
    household_size: Optional[int] = None


class FinancialInfo(BaseModel):
    annual_income: Optional[float] = None
    monthly_income: Optional[float] = None
    primary_income_source: Optional[str] = None
    secondary_income: Optional[float] = None
    debt_total: Optional[float] = None
    emergency_fund_target: Optional[float] = None
    current_savings: Optional[float] = None


class Goals(BaseModel):
    short_term: List[str] = Field(default_factory=list)
    medium_term: List[str] = Field(default_factory=list)
    long_term: List[str] = Field(default_factory=list)
    monthly_budget_target: Optional[float] = None
    savings_rate: Optional[float] = None


class Preferences(BaseModel):
    risk_tolerance: Optional[Literal["low", "medium", "high"]] = None
    investment_experience: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    budgeting_style: Optional[Literal["strict", "flexible", "loose"]] = None
    priority_categories: List[str] = Field(default_factory=list)


class Notes(BaseModel):
    financial_concerns: List[str] = Field(default_factory=list)
    upcoming_expenses: List[str] = Field(default_factory=list)
    budget_challenges: List[str] = Field(default_factory=list)
    additional_context: Optional[str] = None


class UserContext(BaseModel):
    personal: PersonalInfo = Field(default_factory=PersonalInfo)
    family: FamilyInfo = Field(default_factory=FamilyInfo)
    financial: FinancialInfo = Field(default_factory=FinancialInfo)
    goals: Goals = Field(default_factory=Goals)
    preferences: Preferences = Field(default_factory=Preferences)
    notes: Notes = Field(default_factory=Notes)
