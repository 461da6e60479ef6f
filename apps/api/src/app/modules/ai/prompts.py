"""
AI Prompt Templates

Prompt construction for recommendation and follow-up requests, the urgent
case block, disclaimers and the canned responses returned when the AI
provider is unavailable.
"""

import re

from app.modules.ai.schemas import FollowUpRequest, RecommendationRequest

LESSON_PLAN_MAX_CHARS = 25000
LESSON_PLAN_TRUNCATION_NOTE = (
    "\n\n[Content truncated due to length - showing first 25,000 characters]"
)

DISCLAIMER = (
    "⚠️ IMPORTANT DISCLAIMER: These AI-generated recommendations are for informational "
    "purposes only and should not replace professional educational assessment. Please refer "
    "this student to your school's student support department for proper evaluation and "
    "vetting. All AI-generated suggestions must be reviewed and approved by qualified "
    "educational professionals before implementation."
)
DISCLAIMER_NO_API_KEY = " (No API key configured in admin interface, returning mock data)"
DISCLAIMER_AUTH_FAILED = " (API authentication failed, returning mock data)"
DISCLAIMER_UNAVAILABLE = " (API service unavailable, returning mock data)"

URGENT_CASE_BLOCK = """

### **🚨 URGENT CASE - IMMEDIATE ACTION REQUIRED**

**Share this case with Student Support immediately:**
* Forward this concern and intervention plan to your school's student support team
* Schedule urgent consultation with counselor, social worker, or special education coordinator
* Document all interventions and student responses for the support team
* Consider immediate safety protocols if student welfare is at risk
* Escalate to administration if no improvement within 48-72 hours

**Contact your school's student support department today to ensure this student receives comprehensive, coordinated care.**"""

EMPTY_RECOMMENDATIONS = "Unable to generate recommendations at this time."
EMPTY_FOLLOW_UP = "Unable to generate follow-up assistance at this time."

CHINESE_REQUEST_PATTERN = re.compile(
    r"chinese|中文|中国|翻译|中国人|中国话|中文版|translate.*chinese|write.*chinese|explain.*chinese",
    re.IGNORECASE,
)

_SPECIALIST_ROLE = (
    "You are a highly trained educational intervention specialist with expertise in "
    "evidence-based practices, special education law, and research-backed classroom strategies."
)
_SPECIALIST_BRIEF = (
    "Provide comprehensive, research-backed intervention strategies with specific "
    "implementation details, materials lists, progress monitoring tools, and timeline "
    "expectations. Base all recommendations on peer-reviewed educational research and proven "
    "classroom practices. Include specific data collection methods and evidence-based "
    "modifications."
)
_IMPLEMENTATION_ROLE = (
    "You are a highly trained educational intervention specialist with expertise in "
    "implementation science and evidence-based classroom practices."
)
_IMPLEMENTATION_BRIEF = (
    "Provide comprehensive, research-backed implementation guidance with specific procedural "
    "steps, materials lists, data collection methods, and troubleshooting strategies. Base all "
    "recommendations on proven implementation research and successful classroom practices."
)


def target_language(language: str | None) -> str | None:
    """The requested output language, or None for English."""
    if not language or language.strip().lower() == "english":
        return None
    return language.strip()


def truncate_lesson_plan(content: str | None) -> str:
    if not content:
        return ""
    if len(content) <= LESSON_PLAN_MAX_CHARS:
        return content
    return content[:LESSON_PLAN_MAX_CHARS] + LESSON_PLAN_TRUNCATION_NOTE


def is_chinese_request(question: str) -> bool:
    return bool(CHINESE_REQUEST_PATTERN.search(question or ""))


def _join_with_other(values: list[str], other: str | None, empty: str) -> str:
    if not values:
        return empty
    text = ", ".join(values)
    if other:
        text += f", {other}"
    return text


def differentiation_needs(req: RecommendationRequest) -> list[str]:
    """Human-readable learning needs from the differentiation fields."""
    needs = []
    if req.has_iep:
        needs.append("Has IEP (Individualized Education Program)")
    if req.has_disability and req.disability_type:
        needs.append(f"Diagnosed with: {req.disability_type}")
    if req.is_eal_learner and req.eal_proficiency:
        needs.append(f"EAL Learner ({req.eal_proficiency} English proficiency)")
    if req.is_gifted:
        needs.append("Identified as gifted/talented")
    if req.is_struggling:
        needs.append("Currently struggling academically")
    if req.other_needs:
        needs.append(f"Additional needs: {req.other_needs}")
    return needs


def recommendation_system_prompt(language: str | None) -> str:
    lang = target_language(language)
    if lang is None:
        return f"{_SPECIALIST_ROLE} {_SPECIALIST_BRIEF}"
    return (
        f"{_SPECIALIST_ROLE} You are fluent in {lang} and will provide all responses in {lang}. "
        f"{_SPECIALIST_BRIEF} All content must be in {lang}."
    )


def follow_up_system_prompt(chinese: bool) -> str:
    if not chinese:
        return f"{_IMPLEMENTATION_ROLE} {_IMPLEMENTATION_BRIEF}"
    return (
        f"{_IMPLEMENTATION_ROLE} You are fluent in Chinese and will provide all responses in "
        f"simplified Chinese (中文). {_IMPLEMENTATION_BRIEF} All content must be in Chinese."
    )


def _student_header(req: RecommendationRequest) -> str:
    return (
        f"**Student Information:**\n"
        f"- Name: {req.student_first_name} {req.student_last_initial}\n"
        f"- Grade: {req.grade}\n"
        f"- Teacher: {req.teacher_position}\n"
        f"- Location: {req.location}"
    )


def _lesson_plan_differentiation_prompt(req: RecommendationRequest, lesson_plan: str) -> str:
    needs = "\n".join(differentiation_needs(req))
    return f"""You are an educational differentiation specialist AI assistant. Your primary task is to take the uploaded lesson plan and create a differentiated version specifically adapted for this student's learning needs.

{_student_header(req)}

**Student Learning Profile:**
{needs}

**ORIGINAL LESSON PLAN TO DIFFERENTIATE:**
{lesson_plan}

**YOUR TASK:** Create a differentiated version of the above lesson plan specifically adapted for {req.student_first_name}'s learning needs. Provide a complete, ready-to-use lesson plan that includes:

1. **Differentiated Learning Objectives:**
   - Modified or tiered objectives that match the student's ability level
   - Clear, measurable goals appropriate for their needs

2. **Adapted Content Delivery:**
   - Modified explanation methods
   - Visual supports and graphic organizers
   - Chunked information presentation
   - Alternative vocabulary or simplified language

3. **Differentiated Activities:**
   - Step-by-step modified activities from the original lesson
   - Alternative ways to engage with the content
   - Scaffolded practice opportunities
   - Choice options for different learning preferences

4. **Modified Assessment Methods:**
   - Alternative ways for the student to demonstrate understanding
   - Adapted rubrics or success criteria
   - Formative assessment strategies during the lesson

5. **Specific Accommodations:**
   - Environmental modifications needed
   - Technology tools or supports
   - Time adjustments
   - Material adaptations

6. **Implementation Notes:**
   - Specific instructions for the teacher
   - What to prepare in advance
   - Timing considerations

**Format:** Provide a complete, restructured lesson plan that the teacher can use immediately. Include specific examples, actual materials, and concrete directions. This should be a differentiated version of the original lesson, not general strategies."""


def _differentiation_prompt(req: RecommendationRequest) -> str:
    needs = "\n".join(differentiation_needs(req))
    name = req.student_first_name
    return f"""You are a leading educational specialist with advanced expertise in differentiated instruction, Universal Design for Learning (UDL), and evidence-based teaching practices. Drawing from current research in cognitive science, special education, and instructional design, provide detailed, immediately implementable differentiation strategies with specific learning objectives, assessment criteria, and research citations where applicable.

{_student_header(req)}

**Student Learning Profile:**
{needs}

**CRITICAL REQUIREMENTS:**
- All strategies must be evidence-based and cite relevant educational research
- Provide specific, concrete examples with step-by-step implementation
- Include materials lists and preparation requirements
- Address multiple learning modalities (visual, auditory, kinesthetic, tactile)
- Consider Universal Design for Learning (UDL) principles
- Differentiate for this student's specific needs, not generic accommodations

**Required Output Structure:**

## **Student Learning Profile Summary**
Provide a comprehensive analysis of {name}'s learning strengths, challenges, and optimal learning conditions based on the profile provided.

## **1. Content Modifications**
### **Adjusting Complexity**
- Specific techniques for scaffolding content (include 3-5 concrete examples)
- Grade-appropriate modifications while maintaining rigor
- Multi-level materials and resources

### **Multiple Representations**
- Visual supports (graphic organizers, concept maps, infographics)
- Auditory options (recordings, verbal explanations, music integration)
- Kinesthetic activities (hands-on manipulatives, movement-based learning)

### **Interest-Based Adaptations**
- Ways to connect content to student interests and cultural background
- Choice menus for topics and project themes

## **2. Process Modifications**
### **Instructional Delivery**
- Specific teaching strategies matched to learning style
- Pacing adjustments and chunking methods
- Collaborative vs. independent work balance

### **Scaffolding Techniques**
- Step-by-step process breakdowns
- Think-aloud strategies
- Peer support systems and buddy partnerships

### **Technology Integration**
- Assistive technology recommendations
- Digital tools and apps specific to learning needs
- Accessibility features and settings

## **3. Product Alternatives**
### **Assessment Options**
- Multiple ways to demonstrate mastery (portfolios, presentations, projects)
- Alternative assessment formats
- Modified rubrics with clear success criteria

### **Expression Methods**
- Written, oral, visual, and digital product options
- Creative alternatives to traditional assignments

## **4. Learning Environment Optimization**
### **Physical Space**
- Seating arrangements and workspace modifications
- Sensory considerations (lighting, noise, textures)
- Organization systems and visual supports

### **Social Environment**
- Grouping strategies for optimal learning
- Peer interaction structures
- Communication supports

## **5. Implementation Timeline**

### **Week 1-2: Immediate Strategies**
- Quick wins and essential accommodations
- Initial data collection methods

### **Weeks 3-6: Short-term Adaptations**
- Skill-building interventions
- Progress monitoring systems

### **Ongoing: Long-term Support**
- Sustainable classroom modifications
- Transition planning for future grades

## **6. Progress Monitoring & Data Collection**
- Specific metrics to track improvement
- Data collection tools and schedules
- When and how to adjust strategies

## **7. Collaboration & Communication**
- Parent/family engagement strategies
- Coordination with support staff
- Documentation requirements

**Format Requirements:**
- Use bullet points for easy scanning
- Include specific examples for each strategy
- Provide implementation timelines
- List required materials and resources
- Make all recommendations immediately actionable for classroom use"""


def _classroom_management_prompt(req: RecommendationRequest) -> str:
    concern_types = _join_with_other(req.concern_types, req.other_concern_type, "Not specified")
    actions_taken = _join_with_other(req.actions_taken, req.other_action_taken, "None documented")
    return f"""You are an experienced classroom management coach with expertise in Positive Behavioral Interventions and Supports (PBIS), restorative practices, and evidence-based whole-class strategies. Provide practical strategies the teacher can apply to the entire class, not a single student.

## Classroom Context:
- **Grade Level**: {req.grade}
- **Teacher**: {req.teacher_position}
- **Setting**: {req.location}
- **Date Observed**: {req.incident_date}
- **Classroom Challenges**: {concern_types}
- **Severity Level**: {req.severity_level}
- **Strategies Already Tried**: {actions_taken}
- **Description**: {req.description}

## REQUIRED RESPONSE FORMAT:

### **1. Classroom Climate Analysis**
- Likely drivers of the described challenges (routines, transitions, engagement, environment)
- Strengths to build on

### **2. Whole-Class Routines and Expectations**
- Specific routines to teach, model and practice
- Positively stated expectations with example wording
- Visual supports to post in the room

### **3. Engagement and Instructional Pacing**
- Active participation techniques (cold calling, response cards, turn-and-talk)
- Pacing and transition strategies with exact timings

### **4. Reinforcement Systems**
- Group contingencies and class-wide recognition
- Specific praise ratios and examples

### **5. Responding to Disruption**
- A tiered response plan from least to most intrusive
- De-escalation language the teacher can use word for word

### **6. Implementation Timeline**
- **Week 1**: Setup and teaching of routines
- **Weeks 2-4**: Practice, reinforcement and data collection
- **Week 5+**: Review and adjustment

### **7. Progress Monitoring**
- Simple class-wide data collection methods
- Decision rules for adjusting the plan

**FORMATTING REQUIREMENTS**: Use detailed bullet points, include specific timeframes, and make every strategy immediately actionable for the whole class."""


def _intervention_prompt(req: RecommendationRequest, lesson_plan: str) -> str:
    concern_types = _join_with_other(req.concern_types, req.other_concern_type, "Not specified")
    actions_taken = _join_with_other(req.actions_taken, req.other_action_taken, "None documented")
    needs = differentiation_needs(req)
    learning_profile = "; ".join(needs) if needs else "No specific learning needs documented"

    lesson_plan_section = (
        f"\n\n**LESSON PLAN DIFFERENTIATION REQUIRED**:\n{lesson_plan}" if lesson_plan else ""
    )
    lesson_plan_requirement = (
        "**CRITICAL**: Provide specific, detailed adaptations to the uploaded lesson plan. "
        "Include modified objectives, alternative activities, assessment accommodations, and "
        "environmental considerations. Make the lesson accessible while maintaining academic rigor."
        if lesson_plan
        else ""
    )

    return f"""You are a highly trained educational intervention specialist and instructional coach with 15+ years of classroom experience, expertise in evidence-based practices, special education law, Universal Design for Learning (UDL), and research-backed classroom strategies. You provide comprehensive, detailed, actionable Tier 2 interventions based on current educational research and best practices from leading institutions.

**CRITICAL ANALYSIS REQUIRED**: You MUST provide detailed analysis and evidence-based solutions that go beyond surface-level recommendations. Teachers need specific, practical strategies they can implement immediately.

## Student Profile Analysis:
- **Name**: {req.student_first_name} {req.student_last_initial}
- **Grade Level**: {req.grade}
- **Teacher**: {req.teacher_position}
- **Incident Date**: {req.incident_date}
- **Location**: {req.location}
- **Primary Concerns**: {concern_types}
- **Severity Level**: {req.severity_level}
- **Previous Interventions**: {actions_taken}
- **Learning Profile**: {learning_profile}
- **Detailed Description**: {req.description}{lesson_plan_section}

## COMPREHENSIVE INTERVENTION REQUIREMENTS:

### Evidence-Based Foundation
- Cite specific research studies and educational frameworks (e.g., RTI, PBIS, UDL, trauma-informed practices)
- Reference proven intervention programs and methodologies
- Include success metrics and expected outcomes

### Detailed Implementation Specifications
- Provide step-by-step implementation guides with exact scripts and materials
- Include timing, frequency, and duration for each strategy
- Specify required materials, resources, and preparation time
- Offer multiple differentiation options for varying ability levels

### Lesson Plan Adaptation Requirements
{lesson_plan_requirement}

### Differentiation Specifications
For the identified learning profile ({learning_profile}), provide:
- Sensory and cognitive processing accommodations
- Language and communication supports
- Social-emotional regulation strategies
- Academic skill scaffolding techniques
- Technology integration recommendations

## REQUIRED RESPONSE FORMAT:

### **1. Comprehensive Student Analysis**
- Detailed analysis of concerns, learning profile, and contributing factors
- Risk factors and protective factors identification

### **2. Evidence-Based Intervention Framework**
- Primary intervention approach with research citations
- Theoretical foundation (behavioral, cognitive, academic)
- Expected outcomes and success indicators

### **3. Immediate Action Plan (Days 1-14)**
**Strategy 1: [Specific Strategy Name]**
- **Research Base**: [Citation/Framework]
- **Materials Needed**: [Detailed list]
- **Implementation Steps**:
  1. [Detailed step with timing]
  2. [Detailed step with timing]
  3. [Detailed step with timing]
- **Data Collection**: [Specific methods and tools]
- **Success Criteria**: [Measurable outcomes]

**Strategy 2: [Additional Strategy if needed]**
[Same detailed format]

### **4. Short-Term Intensive Support (Weeks 3-8)**
**Primary Focus Area: [Specific skill/behavior]**
- **Intervention Program**: [Specific program name if applicable]
- **Frequency**: [Exact schedule]
- **Progress Monitoring**: [Weekly data collection methods]
- **Adaptation Protocol**: [When and how to modify]

### **5. Long-Term Skill Development (Weeks 9-16)**
**Maintenance and Generalization Strategies**
- **Skill Transfer Plans**: [Cross-setting implementation]
- **Independence Building**: [Scaffolding reduction plan]
- **Family Engagement**: [Home-school collaboration strategies]

### **6. Comprehensive Progress Monitoring System**
- **Daily Data**: [Quick check methods]
- **Weekly Assessment**: [Formal measurement tools]
- **Monthly Review**: [Comprehensive evaluation criteria]
- **Decision Points**: [When to continue, modify, or escalate]

### **7. Collaboration and Communication Plan**
- **Team Members**: [Who needs to be involved]
- **Meeting Schedule**: [Regular check-in frequency]
- **Documentation Requirements**: [Record-keeping protocols]
- **Parent Communication**: [Update frequency and methods]

### **8. Escalation and Support Protocols**
- **Warning Signs**: [Specific behavioral/academic indicators]
- **Immediate Response**: [Crisis intervention steps]
- **Referral Criteria**: [When to involve specialists]
- **Emergency Contacts**: [Who to call and when]

### **9. Resource Recommendations**
- **Professional Development**: [Suggested training for teacher]
- **Educational Materials**: [Specific programs, books, websites]
- **Technology Tools**: [Apps, software, assistive devices]
- **Community Resources**: [External support services]

**FORMATTING REQUIREMENTS**: Use detailed bullet points, include specific timeframes, provide exact implementation steps, and ensure all recommendations are immediately actionable for classroom teachers."""


def language_instruction(language: str) -> str:
    return (
        f"\n\n**IMPORTANT LANGUAGE REQUIREMENT: Please provide all recommendations, strategies, "
        f"and content in {language}. Ensure all text, headers, implementation steps, and "
        f"materials are written in {language}. Use culturally appropriate examples and "
        f"references for {language}-speaking communities when applicable.**"
    )


def build_recommendation_prompt(req: RecommendationRequest) -> str:
    """User prompt for a recommendation request, chosen by task type."""
    lesson_plan = truncate_lesson_plan(req.lesson_plan_content)

    if req.task_type == "differentiation":
        if lesson_plan:
            prompt = _lesson_plan_differentiation_prompt(req, lesson_plan)
        else:
            prompt = _differentiation_prompt(req)
    elif req.task_type == "classroom_management":
        prompt = _classroom_management_prompt(req)
    else:
        prompt = _intervention_prompt(req, lesson_plan)

    lang = target_language(req.language)
    if lang:
        prompt += language_instruction(lang)
    return prompt


def build_follow_up_prompt(req: FollowUpRequest, chinese: bool) -> str:
    concern_types = ", ".join(req.concern_types) if req.concern_types else "Not specified"

    prompt = (
        f"{_IMPLEMENTATION_ROLE} Provide detailed, research-backed implementation guidance for "
        "Tier 2 interventions with specific steps, materials, troubleshooting, and progress "
        "monitoring strategies."
    )
    if chinese:
        prompt += (
            "\n\n**IMPORTANT LANGUAGE REQUIREMENT: The user is requesting a Chinese translation "
            "or explanation. Please provide your entire response in simplified Chinese (中文). "
            "All text, headers, implementation steps, and materials should be written in "
            "Chinese. Use culturally appropriate examples for Chinese-speaking communities.**"
        )

    prompt += f"""

Context:
- Student: {req.student_first_name} {req.student_last_initial}.
- Grade: {req.grade}
- Concern Types: {concern_types}
- Severity Level: {req.severity_level}

Original AI-Generated Recommendations:
{req.original_recommendations}

Teacher's Specific Question/Request for Additional Assistance:
{req.question}

Please provide detailed, practical guidance to help the teacher implement the interventions effectively. Your response should:

1. **Direct Answer** - Address the specific question or concern raised
2. **Implementation Steps** - Provide clear, step-by-step guidance
3. **Practical Tips** - Include classroom management strategies and best practices
4. **Resources Needed** - Specify any materials, tools, or support required
5. **Timeline Considerations** - Suggest realistic timeframes for implementation
6. **Troubleshooting** - Anticipate potential challenges and provide solutions
7. **Progress Monitoring** - Explain how to track effectiveness and make adjustments
8. **When to Seek Additional Support** - Clear indicators for escalating to specialists

Focus on actionable advice that a classroom teacher can realistically implement. Use professional educational terminology while keeping explanations clear and practical. Structure your response with clear headings and bullet points for easy reading."""
    return prompt


# ============================================================================
# Canned responses
# ============================================================================


def mock_differentiation(req: RecommendationRequest) -> str:
    name = req.student_first_name
    return f"""# Differentiation Strategies for {name} {req.student_last_initial}

## **Student Learning Profile Summary**
Based on the provided learning profile information, {name} demonstrates unique learning strengths and needs that require targeted differentiation strategies. This student would benefit from multi-modal instruction, structured support systems, and flexible learning options to maximize academic success and engagement.

## **1. Content Modifications**

### **Adjusting Complexity**
- **Scaffolded Content Delivery**: Break lessons into 10-15 minute chunks with visual organizers
- **Multi-Level Materials**: Provide same content at 3 different reading levels (below, at, above grade level)
- **Concept Mapping**: Use graphic organizers to show relationships between ideas
- **Vocabulary Pre-Teaching**: Introduce key terms with visual aids and real-world examples

### **Multiple Representations**
- **Visual Supports**: Create infographics, charts, and color-coded materials for key concepts
- **Auditory Options**: Provide recorded instructions, audiobooks, and verbal processing time
- **Kinesthetic Activities**: Use manipulatives, role-playing, and movement-based learning

## **2. Process Modifications**

### **Instructional Delivery**
- **Think-Aloud Modeling**: Demonstrate problem-solving processes step-by-step
- **Chunked Instruction**: Present information in small, manageable segments
- **Wait Time**: Provide 5-7 seconds for processing before expecting responses

### **Scaffolding Techniques**
- **Step-by-Step Guides**: Create visual process charts for complex tasks
- **Peer Buddy System**: Pair with supportive classmate for collaboration and support
- **Teacher Check-Ins**: Schedule brief 2-minute progress checks every 15 minutes

## **3. Product Alternatives**

### **Assessment Options**
- **Portfolio Collections**: Gather work samples showing progress over time
- **Oral Presentations**: Allow verbal demonstration of knowledge
- **Choice Boards**: Offer 6-9 options for demonstrating learning

## **4. Learning Environment Optimization**

### **Physical Space**
- **Flexible Seating**: Standing desk, stability ball, floor cushions, traditional desk options
- **Quiet Zones**: Designated low-stimulation areas with noise-reducing headphones
- **Movement Breaks**: Scheduled 2-minute movement opportunities every 20 minutes

## **5. Implementation Timeline**

### **Week 1-2: Immediate Strategies**
- Set up physical environment modifications (seating, organization systems)
- Introduce visual supports and communication methods
- Begin data collection on current performance levels

### **Weeks 3-6: Short-term Adaptations**
- Implement scaffolded instruction techniques and chunked content delivery
- Introduce technology tools and assistive supports
- Monitor progress and adjust strategies based on student response

## **6. Progress Monitoring & Data Collection**

- **Weekly Academic Data**: Track completion rates, accuracy scores, and engagement levels
- **Behavioral Observations**: Document on-task behavior, social interactions, and self-regulation
- **Adjustment Protocol**: Modify strategies if no progress seen after 2-3 weeks of consistent implementation

## **7. Collaboration & Communication**

- **Family Partnership**: Share strategies for home reinforcement, communicate progress weekly
- **Support Staff Coordination**: Collaborate with special education team, counselors, and specialists

**Note**: These are research-based strategies that should be implemented consistently and monitored for effectiveness. Regular communication with all stakeholders ensures the best possible outcomes for {name}."""


def mock_classroom_management(req: RecommendationRequest) -> str:
    return f"""# Classroom Management Strategies (Grade {req.grade})

## Whole-Class Routines (Week 1)

**1. Entry and Transition Routines**
- Implementation: Teach, model and practice a 3-step entry routine and a countdown transition signal
- Expected outcomes: Faster, calmer starts to lessons
- Timeline: Teach on day 1, practice daily for 2 weeks
- Materials needed: Posted routine chart, timer

**2. Positively Stated Expectations**
- Implementation: Co-create 3-5 class expectations and post them with visuals
- Expected outcomes: Shared understanding of what success looks like
- Timeline: Within the first 3 days

## Engagement Strategies (Weeks 2-4)

**3. Active Participation**
- Implementation: Use response cards, turn-and-talk and randomized calling in every lesson
- Expected outcomes: Fewer off-task moments during instruction

**4. Class-Wide Reinforcement**
- Implementation: Group goal with a visible tracker and a small weekly celebration
- Expected outcomes: Increased cooperation and peer encouragement

## Responding to Disruption

- Proximity and non-verbal cues first
- Brief private redirection using calm, neutral language
- Reset space and restorative conversation when needed

## Progress Monitoring

- Tally disruptions during one lesson per day
- Review weekly and adjust routines that are not working"""


def mock_intervention(req: RecommendationRequest) -> str:
    concern_types = ", ".join(req.concern_types)
    return f"""# Assessment Summary

Based on the {req.severity_level} level concerns related to {concern_types} for {req.student_first_name} {req.student_last_initial}. (Grade {req.grade}), the following Tier 2 interventions are recommended to address the observed challenges in {req.location}.

## Immediate Interventions (1-2 weeks)

**1. Structured Check-In System**
- Implementation: Daily 2-minute check-ins at the beginning of class
- Expected outcomes: Improved communication and early identification of issues
- Timeline: Start immediately, continue for 2 weeks minimum
- Materials needed: Simple check-in form or digital tool

**2. Clear Expectations and Visual Supports**
- Implementation: Create visual schedule and behavior expectations chart
- Expected outcomes: Increased understanding of classroom routines
- Timeline: Implement within 3 days
- Materials needed: Poster board, markers, laminator

## Short-term Strategies (2-6 weeks)

**3. Targeted Skill Building**
- Implementation: 15-minute focused sessions 3x per week
- Expected outcomes: Improvement in specific skill areas
- Timeline: 4-6 week intervention cycle
- Materials needed: Skill-specific worksheets and manipulatives

**4. Peer Support System**
- Implementation: Pair student with trained peer mentor
- Expected outcomes: Improved social skills and academic support
- Timeline: 4 weeks with weekly check-ins
- Materials needed: Peer mentor training materials

## Long-term Support (6+ weeks)

**5. Comprehensive Behavior Plan**
- Implementation: Develop individualized behavior intervention plan
- Expected outcomes: Sustained positive behavior changes
- Timeline: Ongoing with monthly reviews
- Materials needed: Data collection sheets, reward system

**6. Family Collaboration**
- Implementation: Regular communication with family about strategies
- Expected outcomes: Consistent support across environments
- Timeline: Ongoing partnership
- Materials needed: Communication log, home-school collaboration forms

## Progress Monitoring

- Weekly data collection on target behaviors/skills
- Bi-weekly review of intervention effectiveness
- Monthly team meetings to assess progress
- Use of standardized assessment tools as appropriate

## When to Escalate

Consider referring to the student support team if:
- No improvement after 4-6 weeks of consistent intervention
- Behaviors escalate in frequency or intensity
- Student expresses safety concerns
- Additional assessment needs are identified
- Family requests formal evaluation

## Additional Research-Based Resources

**Professional Development:** Consider attending training on specific intervention strategies
**Assessment Tools:** Use validated instruments to monitor progress (CBM, behavior tracking)
**Collaboration:** Partner with special education team and school psychologist for ongoing support"""


def mock_recommendations(req: RecommendationRequest) -> str:
    if req.task_type == "differentiation":
        return mock_differentiation(req)
    if req.task_type == "classroom_management":
        return mock_classroom_management(req)
    return mock_intervention(req)


def mock_follow_up(req: FollowUpRequest) -> str:
    return f"""## Direct Answer

Thank you for your question: "{req.question}"

Based on your specific implementation question and the original recommendations for {req.student_first_name} {req.student_last_initial}., here's detailed guidance to help you move forward effectively.

## Implementation Steps

**Step 1: Preparation (Days 1-2)**
- Gather necessary materials and resources
- Set up physical space if needed
- Prepare any visual aids or tools
- Brief any support staff involved

**Step 2: Introduction (Days 3-5)**
- Introduce the intervention to the student
- Explain expectations clearly
- Model the desired behavior or skill
- Practice together initially

**Step 3: Implementation (Week 2+)**
- Begin consistent daily implementation
- Monitor student response closely
- Adjust approach based on student needs
- Document progress regularly

## Practical Tips

- **Start Small**: Begin with shorter sessions and gradually increase
- **Be Consistent**: Same time, same approach daily
- **Stay Positive**: Focus on effort and improvement, not perfection
- **Involve the Student**: Ask for their input and feedback
- **Communicate**: Keep parents and support team informed

## Resources Needed

- Timer for structured activities
- Data collection sheet or app
- Visual supports (charts, pictures)
- Reinforcement items or activities
- Communication log for home-school connection

## Timeline Considerations

- **Week 1**: Setup and introduction
- **Weeks 2-4**: Full implementation with daily monitoring
- **Week 4**: Mid-point review and adjustments
- **Weeks 5-6**: Continue with any modifications
- **Week 6**: Comprehensive review and next steps

## Troubleshooting

**If the student resists:**
- Check if expectations are too high
- Increase reinforcement frequency
- Involve student in goal-setting

**If no progress is seen:**
- Review implementation fidelity
- Consider environmental factors
- Consult with support team

## Progress Monitoring

- Daily: Quick check on target behavior/skill
- Weekly: Review data trends and patterns
- Monthly: Comprehensive review with team

## When to Seek Additional Support

Contact your student support team if:
- No improvement after 3-4 weeks of consistent implementation
- Student safety concerns arise
- Behaviors escalate beyond classroom management
- You need additional resources or training
- Family has concerns or questions

**Note:** This is demonstration assistance. In a real implementation, the guidance would be more specifically tailored to your exact question and situation."""
