"""
Email Templating Service

Maps a classified record and its primary trigger to canned outreach text.
Selection is deterministic for a given record and date; the only random
choice (the credibility sentence) draws from an injected random.Random.
"""
import logging
import random
from typing import List, Optional

from ..models.leads import EmailMessage, EmailTrigger, LeadType
from ..utils.dates import parse_date
from .engine.applications import ApplicationAnalysis
from .engine.enforcement import EnforcementAnalysis
from .engine.fit import TrialAnalysis

logger = logging.getLogger(__name__)

SIGNATURE = "Best regards,\n[Your name]\n[Your title]\nRegulatory Intelligence Consulting"

CRITICAL_URGENCY_LINE = (
    "Given the time-sensitive nature of your situation, I can prioritize this analysis "
    "and deliver initial insights within 24-48 hours."
)
TRIAL_URGENCY_LINE = "I can complete this analysis within 2-3 hours and provide actionable insights for your team."


def bullets(points: List[str]) -> str:
    return "\n".join(f"• {point}" for point in points)


def assemble_body(message: EmailMessage) -> str:
    """Join the non-empty paragraphs in reading order."""
    parts = [
        message.greeting,
        message.opening,
        message.problem_statement,
        message.solution,
        message.specific_analysis,
        message.competitive_context,
        message.credibility,
        message.urgency,
        message.call_to_action,
        message.signature,
    ]
    return "\n\n".join(part.strip() for part in parts if part and part.strip())


def _format_deadline(value: Optional[str]) -> str:
    parsed = parse_date(value)
    return parsed.strftime("%b %d, %Y") if parsed else "within 180 days"


class EmailTemplateEngine:
    """
    Builds email triggers and rendered emails for every lead type.

    Args:
        rng: Source for the credibility sentence; pass random.Random(seed)
            for reproducible output
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Shared
    # ------------------------------------------------------------------

    def credibility(self, submission_type: Optional[str] = None) -> str:
        statements = [
            "This approach recently helped a similar sponsor reduce their review time by 3 months.",
            "Our analysis identified critical precedents that strengthened a client's FDA response.",
            "Similar intelligence enabled a sponsor to successfully navigate their first CRL.",
            "This type of analysis has helped multiple sponsors optimize their regulatory strategies.",
            f"We recently analyzed 50+ {submission_type or 'similar'} submissions to identify success patterns.",
        ]
        return self.rng.choice(statements)

    def _finish(self, message: EmailMessage) -> EmailMessage:
        message.body = assemble_body(message)
        return message

    # ------------------------------------------------------------------
    # Drug applications
    # ------------------------------------------------------------------

    def application_trigger(self, analysis: ApplicationAnalysis) -> EmailTrigger:
        issues = analysis.intelligence.issues
        urgent = next((i for i in issues if i.severity == "CRITICAL"), issues[0] if issues else None)
        division = analysis.division.division if analysis.division else "the FDA review division"

        trigger = EmailTrigger(
            trigger_type="REGULATORY_STRATEGY",
            subject=f"FDA Regulatory Strategy - {analysis.company_name}",
            main_issue="regulatory strategy optimization",
            personalized_hook="Regulatory consultation opportunity identified",
            context=analysis.intelligence.specific_issue,
            urgency_note="Standard timeline",
            urgency_level="MEDIUM",
        )

        if urgent is not None and urgent.type == "CRL_RESPONSE_REQUIRED":
            trigger.trigger_type = urgent.type
            trigger.subject = f"Urgent: CRL Response Strategy for {analysis.product_name}"
            trigger.main_issue = "Complete Response Letter remediation"
            trigger.personalized_hook = (
                f"I noticed FDA issued a Complete Response Letter for your {analysis.submission_type}. "
                f"Having analyzed 200+ successful CRL responses, I can help accelerate your path to approval."
            )
            trigger.context = (
                f"Your CRL response strategy is critical for maintaining approval timeline. Our analysis "
                f"shows specific approaches that succeed with {division}."
            )
            trigger.urgency_note = f"CRL response deadline: {_format_deadline(urgent.deadline)}"
            trigger.urgency_level = "CRITICAL"
        elif urgent is not None and urgent.type == "RTF_REMEDIATION":
            trigger.trigger_type = urgent.type
            trigger.subject = f"Critical: RTF Remediation for {analysis.application_number}"
            trigger.main_issue = "Refuse to File remediation"
            trigger.personalized_hook = (
                "FDA's Refuse to File for your application requires immediate strategic response. "
                "Our RTF remediation expertise can get you back on track quickly."
            )
            trigger.context = (
                "RTF remediation requires comprehensive quality review and resubmission strategy "
                "within 30 days to maintain priority designation."
            )
            trigger.urgency_note = "Response required within 30 days"
            trigger.urgency_level = "CRITICAL"
        elif urgent is not None and urgent.type == "ACTIVE_REVIEW_OPTIMIZATION":
            trigger.trigger_type = urgent.type
            brand = analysis.products[0].brand_name if analysis.products else None
            trigger.subject = f"FDA Review Strategy for {brand or 'Your Application'}"
            trigger.main_issue = "active FDA review communication strategy"
            trigger.personalized_hook = (
                "Your application is under active FDA review - the optimal time for proactive "
                "communication strategy."
            )
            trigger.context = (
                "Mid-cycle communication and information request preparation can significantly "
                "impact approval timeline."
            )
            trigger.urgency_note = "PDUFA date approaching"
            trigger.urgency_level = "HIGH"

        trigger.offering = "Our regulatory AI analysis provides:"
        trigger.specific_analysis = [
            f"{division} precedent analysis",
            f"{analysis.therapeutic_area} regulatory pathway optimization",
            "FDA reviewer preference insights",
            "Timeline acceleration strategies",
        ]
        trigger.call_to_action = self.application_call_to_action(analysis, trigger.trigger_type)
        return trigger

    def application_call_to_action(self, analysis: ApplicationAnalysis, trigger_type: str) -> str:
        if trigger_type == "CRL_RESPONSE_REQUIRED":
            return (
                "Given your CRL response timeline, I can provide strategic analysis within 48 hours. "
                "Are you available for a brief call this week to discuss your specific FDA concerns?"
            )
        if trigger_type == "RTF_REMEDIATION":
            return (
                "RTF responses are time-critical. I can provide remediation roadmap today. "
                "When could we schedule a 30-minute call to discuss your resubmission strategy?"
            )
        if analysis.status == "FILED_UNDER_REVIEW":
            return (
                "Active FDA reviews benefit from proactive strategy. Could we schedule a call to "
                "discuss precedents for your indication?"
            )
        return (
            "I'd be happy to share specific examples of successful strategies in your situation. "
            "When would work for a brief consultation?"
        )

    def application_email(self, analysis: ApplicationAnalysis, trigger: EmailTrigger) -> EmailMessage:
        urgency = trigger.urgency_note
        if trigger.urgency_level == "CRITICAL":
            urgency = f"{urgency}\n{CRITICAL_URGENCY_LINE}"
        return self._finish(EmailMessage(
            subject=trigger.subject,
            greeting=f"Dear {analysis.company_name} Regulatory Team,",
            opening=trigger.personalized_hook or trigger.context,
            problem_statement=trigger.context,
            solution=trigger.offering,
            specific_analysis=bullets(trigger.specific_analysis),
            credibility=self.credibility(analysis.submission_type),
            urgency=urgency,
            call_to_action=trigger.call_to_action,
            signature=SIGNATURE,
        ))

    # ------------------------------------------------------------------
    # Clinical trials
    # ------------------------------------------------------------------

    def trial_trigger(self, analysis: TrialAnalysis) -> EmailTrigger:
        trial = analysis.record
        phase = analysis.phase
        condition = trial.primary_condition or analysis.indication
        opportunity = analysis.opportunities[0] if analysis.opportunities else None
        stagnation = analysis.stagnation

        if opportunity is not None and opportunity.type == "FIRST_IN_HUMAN":
            trigger = EmailTrigger(
                trigger_type=opportunity.type,
                subject=f"First-in-Human FDA Strategy for {trial.primary_condition or 'Your Program'}",
                main_issue="first-in-human study requiring comprehensive IND strategy",
                personalized_hook=(
                    "Your first-in-human study represents a critical inflection point. Having guided "
                    "50+ FIH programs through FDA, I know the key decisions that determine success."
                ),
                context=(
                    "First-in-human studies require meticulous FDA alignment on dose escalation, safety "
                    "run-in, and patient population to establish a strong foundation for your program."
                ),
                offering="Our FIH expertise covers:",
                specific_analysis=[
                    "IND submission strategy and FDA pre-IND meeting preparation",
                    "Dose escalation design and safety committee protocols",
                    "Patient population definition and inclusion/exclusion criteria optimization",
                    "Biomarker strategy for early efficacy signals",
                    "Phase 2 dose selection and development path planning",
                ],
                urgency_level="CRITICAL",
            )
        elif opportunity is not None and opportunity.type == "PRE_RECRUITMENT_OPTIMIZATION":
            trigger = EmailTrigger(
                trigger_type=opportunity.type,
                subject=f"Pre-Recruitment Protocol Optimization - {trial.nct_id}",
                main_issue="protocol optimization before patient recruitment begins",
                personalized_hook=(
                    "Before recruiting your first patient, there's a critical window to optimize your "
                    "protocol based on latest FDA guidance and successful precedents."
                ),
                context=(
                    "Your trial is positioned to incorporate recent FDA feedback patterns and avoid "
                    "common protocol amendments that delay development."
                ),
                offering="Pre-recruitment optimization includes:",
                specific_analysis=[
                    "Recent FDA guidance interpretation for your indication",
                    "Protocol design optimization based on successful precedents",
                    "Enrollment feasibility assessment and site strategy",
                    "Biomarker strategy refinement",
                    "Statistical plan and interim analysis optimization",
                ],
                urgency_level="HIGH",
            )
        elif opportunity is not None:
            trigger = EmailTrigger(
                trigger_type=opportunity.type,
                subject=f"Early Phase Development Strategy - {condition}",
                main_issue="early phase development strategy optimization",
                personalized_hook=(
                    f"Your new {'Phase 1/2' if phase.is_combo else 'Phase 1'} trial is at the perfect stage "
                    f"for strategic FDA alignment. The decisions made now shape your entire development trajectory."
                ),
                context=(
                    "Early phase success requires careful FDA alignment on dose selection, patient "
                    "population, and Phase 2 design considerations."
                ),
                offering="Our early development intelligence provides:",
                specific_analysis=[
                    "FDA division preferences for dose escalation in your indication",
                    "Biomarker development strategy for Phase 2 readiness",
                    "Patient population optimization and enrichment considerations",
                    "Go/no-go criteria and dose selection methodology",
                    "Phase 2 design planning and endpoint strategy",
                ],
                urgency_level="HIGH",
            )
        elif stagnation is not None:
            trigger = EmailTrigger(
                trigger_type="PHASE2_STAGNATION",
                subject=f"Phase 2 Development Optimization - {condition}",
                main_issue="Phase 2 development optimization and advancement strategy",
                personalized_hook=(
                    f"I noticed potential Phase 2 development challenges with your {condition} program. "
                    f"Having analyzed 200+ Phase 2 programs, I see specific patterns that could help "
                    f"accelerate your path forward."
                ),
                context=stagnation.description,
                offering="Our Phase 2 optimization analysis includes:",
                specific_analysis=[
                    "Root cause analysis of Phase 2 delays in similar programs",
                    "Dose optimization strategies FDA has accepted",
                    "Patient enrichment approaches for improved efficacy signals",
                    "Endpoint optimization for Phase 3 readiness",
                    "Go/no-go decision frameworks and criteria",
                    "Phase 3 design considerations and FDA meeting strategy",
                ],
                urgency_level="HIGH",
                competitive_angle=(
                    "With competitive programs advancing, optimizing your Phase 2 strategy is critical "
                    "for maintaining development leadership."
                ),
            )
        elif analysis.biomarkers.enrichment_strategy == "MIXED_POPULATION":
            markers = "/".join(analysis.biomarkers.specific_markers) or "biomarker"
            trigger = EmailTrigger(
                trigger_type="MIXED_POPULATION",
                subject=f"Biomarker Enrichment Strategy - {trial.nct_id}",
                main_issue="biomarker enrichment strategy requiring FDA alignment",
                personalized_hook=(
                    f"Your mixed biomarker population approach in {condition} is strategically ambitious. "
                    f"Recent FDA decisions show specific patterns for successful implementation."
                ),
                context=(
                    "Mixed biomarker populations require careful statistical planning and FDA alignment "
                    "to support future labeling claims."
                ),
                offering="Our biomarker strategy analysis includes:",
                specific_analysis=[
                    f"Recent FDA positions on {markers} enrichment",
                    "Statistical approaches for mixed populations FDA has endorsed",
                    "Labeling strategy and market access implications",
                    "Adaptive enrichment design precedents",
                    "Companion diagnostic development pathway",
                ],
                urgency_level="HIGH",
            )
        else:
            trigger = EmailTrigger(
                trigger_type="CLINICAL_DEVELOPMENT",
                subject=f"Clinical Development Strategy - {phase.primary} {condition} Trial",
                main_issue="clinical development optimization",
                personalized_hook=(
                    f"Your {phase.primary} trial in {condition} intersects with evolving FDA expectations. "
                    f"Strategic preparation can significantly impact your development timeline."
                ),
                context=(
                    "Your ongoing development would benefit from understanding recent FDA decisions and "
                    "successful precedents in your therapeutic area."
                ),
                offering="Our regulatory intelligence provides:",
                specific_analysis=[
                    f"Recent FDA decisions in {condition}",
                    "Division-specific preferences and precedents",
                    "Successful development strategies in similar programs",
                    "Risk mitigation approaches for common challenges",
                    "Competitive landscape and differentiation opportunities",
                ],
                urgency_level="MEDIUM",
            )

        if phase.is_combo:
            trigger.specific_analysis.append("Phase 1/2 seamless design optimization and interim analysis strategy")

        if analysis.competitive.intensity == "HIGH" and not trigger.competitive_angle:
            trigger.competitive_angle = (
                f"In the competitive {condition} landscape, FDA strategy differentiation is crucial for success."
            )

        if opportunity is not None:
            trigger.call_to_action = (
                f"Given the critical timing of your {opportunity.type.lower().replace('_', ' ')}, I'd recommend "
                f"discussing strategy this week. Are you available for a 20-minute call to explore how our "
                f"analysis could strengthen your approach?"
            )
        elif stagnation is not None:
            trigger.call_to_action = (
                "Phase 2 optimization requires focused analysis. I can provide initial insights within "
                "48 hours. When would work for a brief call to discuss your specific development challenges?"
            )
        else:
            trigger.call_to_action = (
                "Would you be interested in exploring how regulatory intelligence could support your "
                "development strategy? I'm available this week for a brief discussion."
            )
        return trigger

    def trial_email(self, analysis: TrialAnalysis, trigger: EmailTrigger) -> EmailMessage:
        condition = analysis.record.primary_condition or analysis.indication
        main_issue = trigger.main_issue[:1].upper() + trigger.main_issue[1:]
        return self._finish(EmailMessage(
            subject=trigger.subject,
            greeting=f"Dear {analysis.company_name} Clinical Development Team,",
            opening=trigger.personalized_hook or trigger.context,
            problem_statement=(
                f"{main_issue} represents a critical decision point that could significantly impact "
                f"your development timeline and regulatory strategy."
            ),
            solution=trigger.offering,
            specific_analysis=bullets(trigger.specific_analysis),
            competitive_context=trigger.competitive_angle,
            credibility=(
                f"This type of analysis recently helped a {analysis.phase.primary} {condition} sponsor "
                f"identify key protocol modifications that streamlined their FDA interactions."
            ),
            urgency=TRIAL_URGENCY_LINE if trigger.urgency_level == "HIGH" else "",
            call_to_action=trigger.call_to_action,
            signature=SIGNATURE,
        ))

    # ------------------------------------------------------------------
    # Enforcement
    # ------------------------------------------------------------------

    def enforcement_trigger(self, analysis: EnforcementAnalysis) -> EmailTrigger:
        details = analysis.details
        classification = details.classification or "enforcement"
        product = details.product_description or "your product"

        if analysis.lead_type == LeadType.WARNING_LETTER:
            return EmailTrigger(
                trigger_type=LeadType.WARNING_LETTER.value,
                subject=f"Urgent: FDA Compliance Support Following Recent {classification} Action",
                main_issue="FDA enforcement action requiring immediate remediation",
                context=(
                    f"Your recent {classification} enforcement action regarding {product} requires "
                    f"strategic response to prevent escalation."
                ),
                offering=(
                    "Our regulatory AI can analyze similar enforcement actions and their successful "
                    "remediation strategies, helping you develop a comprehensive response plan that "
                    "satisfies FDA requirements."
                ),
                personalized_hook=(
                    f"I noticed the recent FDA {classification} enforcement action regarding {product}. "
                    f"Having analyzed hundreds of warning letter responses, I understand the urgency and "
                    f"complexity of developing a comprehensive remediation strategy."
                ),
                specific_analysis=[
                    "Successful warning letter responses in similar situations",
                    "Root cause analysis patterns FDA finds acceptable",
                    "Timeline benchmarks for remediation",
                    "Strategies to prevent escalation to consent decree",
                    "Division-specific expectations for your response",
                ],
                urgency_level="CRITICAL",
                urgency_note=(
                    "Warning letters typically require response within 15 working days. I can provide "
                    "initial strategic insights within 24 hours to support your response preparation."
                ),
                call_to_action=(
                    "Given the critical timeline, would you be available for a call today or tomorrow to "
                    "discuss how our analysis can strengthen your FDA response?"
                ),
            )

        if analysis.lead_type == LeadType.RECALL:
            if details.voluntary is True:
                mode = "voluntary"
            elif details.voluntary is False:
                mode = "FDA-mandated"
            else:
                mode = "recent"
            class_one = details.classification == "Class I"
            return EmailTrigger(
                trigger_type=LeadType.RECALL.value,
                subject=f"FDA Recall Management Support - {classification}",
                main_issue="managing FDA recall and preventing future occurrences",
                context=(
                    f"Your {mode} recall of {product} presents both immediate compliance needs and "
                    f"long-term quality system improvements."
                ),
                offering=(
                    "We can analyze root causes from similar recalls and provide FDA-aligned corrective "
                    "action strategies."
                ),
                specific_analysis=[
                    "Root cause patterns from similar recalls",
                    "CAPA strategies that satisfy FDA expectations",
                    "Communication strategies to maintain stakeholder confidence",
                    "Quality system enhancements to prevent recurrence",
                    "Post-recall inspection preparation",
                ],
                urgency_level="CRITICAL" if class_one else "HIGH",
                urgency_note=(
                    "Class I recalls require immediate action. I can provide strategic support within hours."
                    if class_one else ""
                ),
                call_to_action=(
                    "Would you like to discuss how this analysis could support both your immediate recall "
                    "response and long-term quality strategy? I'm available this week for a brief call."
                ),
            )

        return EmailTrigger(
            trigger_type=LeadType.INSPECTION_FINDING.value,
            subject="FDA GMP Compliance Intelligence",
            main_issue="GMP compliance gaps identified",
            context="Recent FDA inspections in your sector have identified critical GMP issues.",
            offering=(
                "Our analysis of FDA inspection trends can help you prepare for upcoming inspections "
                "and address common citations."
            ),
            specific_analysis=[
                "Common 483 observations in your facility type",
                "Successful CAPA examples from recent inspections",
                "Inspector focus areas by district",
                "Pre-inspection readiness strategies",
                "Mock inspection preparation",
            ],
            urgency_level="MEDIUM",
            call_to_action=(
                "Would you like to explore how this intelligence could strengthen your inspection "
                "readiness? I have time this week for a brief discussion."
            ),
        )

    def enforcement_email(self, analysis: EnforcementAnalysis, trigger: EmailTrigger) -> EmailMessage:
        company = analysis.company_name
        if analysis.lead_type == LeadType.WARNING_LETTER:
            message = EmailMessage(
                subject=trigger.subject,
                greeting=f"Dear {company} Quality and Regulatory Leadership,",
                opening=trigger.personalized_hook,
                problem_statement=trigger.context,
                solution="Our regulatory AI tool can provide immediate support by analyzing:",
            )
        elif analysis.lead_type == LeadType.RECALL:
            message = EmailMessage(
                subject=trigger.subject,
                greeting=f"Dear {company} Leadership,",
                opening=trigger.context,
                problem_statement=(
                    "Beyond the immediate recall execution, this situation presents an opportunity to "
                    "strengthen your quality systems and prevent future occurrences."
                ),
                solution=f"{trigger.offering}\n\nSpecific areas of analysis:",
            )
        else:
            message = EmailMessage(
                subject=trigger.subject,
                greeting=f"Dear {company} Quality Assurance Team,",
                opening=trigger.context,
                solution=f"{trigger.offering}\n\nOur analysis would include:",
            )
        message.specific_analysis = bullets(trigger.specific_analysis)
        message.urgency = trigger.urgency_note
        message.call_to_action = trigger.call_to_action
        message.signature = SIGNATURE
        return self._finish(message)
