"""
Feline Neurological Knowledge Base - 30 Diagnostic Rules

Static configuration consumed by both diagnosis engines. Each rule pairs a
declarative condition with the clinical payload shown to the owner.

Tiers (priority bands):
  1–5   Critical / trauma
  6–11  Metabolic & acute
  12–16 Infectious & inflammatory
  17–21 Structural & tumours
  22–26 Functional & degenerative
  27–30 Exclusion (30 is the catch-all)

Seizure classification used by the rules:
  none   – no seizure activity observed
  mild   – focal twitching, fly-biting, tremors, spacing out
  severe – full body convulsions, paddling, loss of consciousness
"""
from __future__ import annotations

from typing import Dict, List

from .base import DiagnosticRule, UrgencyLevel
from .conditions import ALWAYS, all_of, any_of, eq, ne, one_of

_E = UrgencyLevel.EMERGENCY
_H = UrgencyLevel.HIGH
_M = UrgencyLevel.MODERATE
_L = UrgencyLevel.LOW

# Display colours per urgency (mirrors URGENCY_DISPLAY below)
_RED_DARK = "#dc2626"
_RED      = "#ef4444"
_AMBER    = "#f59e0b"
_GREEN    = "#10b981"
_GREY     = "#6b7280"


DIAGNOSTIC_RULES: List[DiagnosticRule] = [

    # ── Tier 1: Critical / trauma ────────────────────────────────────────────

    DiagnosticRule(
        id="TRAUMATIC_BRAIN_INJURY",
        name="Traumatic Brain Injury",
        priority=1,
        condition=all_of(eq("recent_trauma", True), eq("seizures", "severe")),
        urgency=_E,
        description="Critical brain trauma with severe seizures indicating intracranial bleeding or swelling",
        clinical_notes=(
            "Severe seizures after trauma indicate significant brain injury",
            "May involve intracranial hemorrhage or cerebral edema",
            "Requires immediate neurosurgical evaluation",
            "Prognosis depends on extent of brain damage and response to treatment",
        ),
        next_steps=(
            "EMERGENCY: Immediate veterinary neurosurgical consultation",
            "IV mannitol or hypertonic saline to reduce brain swelling",
            "Advanced imaging (CT/MRI) to assess bleeding and swelling",
            "Intensive care monitoring with seizure control medications",
        ),
        icon="fa-brain",
        color=_RED_DARK,
    ),

    DiagnosticRule(
        id="SPINAL_FRACTURE",
        name="Spinal Fracture",
        priority=2,
        condition=all_of(eq("recent_trauma", True), eq("mobility_status", "paralyzed")),
        urgency=_E,
        description="Traumatic spinal cord injury with complete loss of motor function",
        clinical_notes=(
            "Paralysis after trauma suggests vertebral fracture or dislocation",
            "Spinal cord compression requires immediate stabilization",
            "Prognosis depends on completeness of injury and time to treatment",
            "May require surgical stabilization and decompression",
        ),
        next_steps=(
            "EMERGENCY: Immediate spinal immobilization",
            "Do not move cat unnecessarily - transport on rigid board",
            "Emergency spinal radiographs and CT scan",
            "Neurosurgical consultation for potential decompression surgery",
        ),
        icon="fa-spine",
        color=_RED_DARK,
    ),

    DiagnosticRule(
        id="GENERAL_TRAUMA",
        name="General Traumatic Injury",
        priority=3,
        condition=eq("recent_trauma", True),
        urgency=_E,
        description="Neurological signs secondary to recent physical trauma",
        clinical_notes=(
            "Trauma can cause various neurological deficits",
            "May involve brain contusion, spinal cord injury, or peripheral nerve damage",
            "Requires systematic neurological assessment",
            "Secondary complications may develop over 24-48 hours",
        ),
        next_steps=(
            "EMERGENCY: Immediate trauma assessment and stabilization",
            "Complete neurological examination to localize injury",
            "Supportive care and pain management",
            "Monitor for deterioration and secondary complications",
        ),
        icon="fa-car-crash",
        color=_RED_DARK,
    ),

    DiagnosticRule(
        id="SADDLE_THROMBUS",
        name="Feline Aortic Thromboembolism (Saddle Thrombus)",
        priority=4,
        condition=all_of(
            ne("mobility_status", "normal"),
            eq("pain_signs", True),
            eq("cold_limbs", True),
        ),
        urgency=_E,
        description="Blood clot blocking aortic blood flow to hind limbs - extremely painful emergency",
        clinical_notes=(
            "Classic triad: paralysis, pain, and cold limbs",
            "Often secondary to underlying heart disease (cardiomyopathy)",
            "Clot typically lodges at aortic bifurcation",
            "Time-critical condition - tissue death occurs within hours",
        ),
        next_steps=(
            "EMERGENCY: Rush to emergency clinic immediately",
            "Aggressive pain management (opioids)",
            "Anticoagulation therapy and clot-busting medications",
            "Cardiac evaluation to identify underlying disease",
        ),
        icon="fa-heart-broken",
        color=_RED_DARK,
    ),

    DiagnosticRule(
        id="ACUTE_TOXICITY",
        name="Acute Toxicity (Poisoning)",
        priority=5,
        condition=all_of(
            eq("onset_speed", "sudden"),
            eq("seizures", "severe"),
            eq("eye_signs", True),
        ),
        urgency=_E,
        description="Severe neurological reaction to toxic substances",
        clinical_notes=(
            "Severe seizures with eye signs suggest neurotoxicity",
            "Common toxins: permethrin, lilies, antifreeze, chocolate",
            "Dilated pupils and tremors are classic signs",
            "Rapid progression can be fatal without immediate treatment",
        ),
        next_steps=(
            "EMERGENCY: Immediate decontamination and supportive care",
            "Bring suspected toxin packaging to vet",
            "Activated charcoal if recent ingestion",
            "Seizure control and intensive monitoring",
        ),
        icon="fa-skull-crossbones",
        color=_RED_DARK,
    ),

    # ── Tier 2: Metabolic & acute ────────────────────────────────────────────

    DiagnosticRule(
        id="HYPOGLYCEMIA",
        name="Severe Hypoglycemia",
        priority=6,
        condition=all_of(
            eq("age_group", "kitten"),
            eq("onset_speed", "sudden"),
            ne("seizures", "none"),
        ),
        urgency=_H,
        description="Critically low blood sugar causing neurological dysfunction",
        clinical_notes=(
            "Kittens have limited glycogen stores and are prone to hypoglycemia",
            "Blood glucose typically below 60 mg/dL",
            "Can progress rapidly from mild signs to coma",
            "Often occurs with stress, illness, or inadequate nutrition",
        ),
        next_steps=(
            "IMMEDIATE: Rub honey or corn syrup on gums",
            "Transport to veterinarian urgently",
            "IV dextrose administration",
            "Identify and treat underlying cause",
        ),
        icon="fa-candy-cane",
        color=_RED,
    ),

    DiagnosticRule(
        id="THIAMINE_DEFICIENCY",
        name="Thiamine Deficiency (Vitamin B1)",
        priority=7,
        condition=eq("neck_flexion", True),
        urgency=_M,
        description="Nutritional deficiency causing characteristic neck curling and neurological signs",
        clinical_notes=(
            "Neck ventroflexion is pathognomonic for thiamine deficiency",
            "Often caused by raw fish diets containing thiaminase",
            "Can progress to seizures and death if untreated",
            "Reversible with prompt thiamine supplementation",
        ),
        next_steps=(
            "Review diet history immediately",
            "Thiamine injections (vitamin B1)",
            "Discontinue raw fish diet",
            "Monitor for improvement within 24-48 hours",
        ),
        icon="fa-fish",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="HYPERTENSION",
        name="Systemic Hypertension (High Blood Pressure)",
        priority=8,
        condition=all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "sudden"),
            any_of(eq("seizures", "mild"), eq("eye_signs", True)),
            eq("mobility_status", "normal"),
        ),
        urgency=_H,
        description="High blood pressure causing acute neurological signs in senior cats",
        clinical_notes=(
            "Mild seizures in seniors with sudden onset often indicate hypertension",
            "Can cause retinal hemorrhages and acute blindness",
            "Often secondary to kidney disease or hyperthyroidism",
            "Blood pressure typically >180 mmHg systolic",
        ),
        next_steps=(
            "Blood pressure measurement",
            "Fundic examination for retinal changes",
            "Antihypertensive medication (amlodipine)",
            "Investigate underlying causes (kidney, thyroid)",
        ),
        icon="fa-heartbeat",
        color=_RED,
    ),

    DiagnosticRule(
        id="HEPATIC_ENCEPHALOPATHY",
        name="Hepatic Encephalopathy (Liver Shunt)",
        priority=9,
        condition=all_of(
            one_of("age_group", "kitten", "adult"),
            eq("seizures", "mild"),
            eq("mobility_status", "wobbly"),
        ),
        urgency=_M,
        description="Liver dysfunction causing toxic buildup and neurological signs",
        clinical_notes=(
            "Portosystemic shunts bypass liver detoxification",
            "Ammonia buildup causes neurological dysfunction",
            "Often presents with mild seizures and ataxia",
            "May be congenital (young cats) or acquired (liver disease)",
        ),
        next_steps=(
            "Liver function tests (bile acids, ammonia)",
            "Abdominal ultrasound to identify shunt",
            "Low-protein diet and lactulose",
            "Surgical shunt ligation if appropriate",
        ),
        icon="fa-liver",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="HYPOCALCEMIA",
        name="Acute Hypocalcemia (Eclampsia)",
        priority=10,
        condition=all_of(
            eq("onset_speed", "sudden"),
            eq("seizures", "mild"),
            eq("mobility_status", "wobbly"),
        ),
        urgency=_H,
        description="Low blood calcium causing muscle tremors and mild seizures",
        clinical_notes=(
            "Often occurs in nursing queens or cats with parathyroid disease",
            "Causes muscle fasciculations and mild seizure activity",
            "Can progress to tetany and severe seizures",
            "Responds rapidly to calcium supplementation",
        ),
        next_steps=(
            "Serum calcium measurement",
            "IV calcium gluconate (slowly)",
            "Identify underlying cause (lactation, parathyroid)",
            "Monitor for cardiac arrhythmias during treatment",
        ),
        icon="fa-bone",
        color=_RED,
    ),

    DiagnosticRule(
        id="BOTULISM_TICK_PARALYSIS",
        name="Botulism / Tick Paralysis",
        priority=11,
        condition=all_of(
            eq("mobility_status", "paralyzed"),
            eq("pain_signs", False),
            eq("onset_speed", "sudden"),
            eq("seizures", "none"),
        ),
        urgency=_H,
        description="Flaccid paralysis without pain from neurotoxins or tick-borne toxins",
        clinical_notes=(
            "Ascending flaccid paralysis without pain or seizures",
            "Botulism from spoiled food or wound contamination",
            "Tick paralysis from neurotoxic tick species",
            "Preserved consciousness with motor paralysis",
        ),
        next_steps=(
            "Thorough examination for attached ticks",
            "Remove any ticks found",
            "Supportive care and respiratory monitoring",
            "Consider botulism antitoxin if available",
        ),
        icon="fa-bug",
        color=_RED,
    ),

    # ── Tier 3: Infectious & inflammatory ────────────────────────────────────

    DiagnosticRule(
        id="NEURO_FIP",
        name="Feline Infectious Peritonitis (Neurological Form)",
        priority=12,
        condition=all_of(
            eq("age_group", "kitten"),
            eq("onset_speed", "gradual"),
            any_of(eq("mobility_status", "wobbly"), eq("seizures", "mild")),
        ),
        urgency=_H,
        description="Viral infection causing progressive neurological inflammation in young cats",
        clinical_notes=(
            "Mutated feline coronavirus causes granulomatous CNS inflammation",
            "Most common in kittens and young cats under 2 years",
            "Progressive course with gradual worsening",
            "Often fatal without aggressive antiviral treatment",
        ),
        next_steps=(
            "FIP diagnostic panel (A:G ratio, PCR testing)",
            "Advanced imaging to assess CNS inflammation",
            "Consider GS-441524 antiviral treatment if available",
            "Supportive care and corticosteroids",
        ),
        icon="fa-virus",
        color=_RED,
    ),

    DiagnosticRule(
        id="TOXOPLASMOSIS",
        name="Toxoplasmosis",
        priority=13,
        condition=all_of(
            ne("age_group", "senior"),
            eq("onset_speed", "gradual"),
            eq("eye_signs", True),
        ),
        urgency=_M,
        description="Protozoal infection causing neurological and ocular signs",
        clinical_notes=(
            "Toxoplasma gondii can cause CNS and ocular disease",
            "More common in younger cats and immunocompromised animals",
            "Eye signs often accompany neurological symptoms",
            "Responds well to appropriate antiprotozoal therapy",
        ),
        next_steps=(
            "Toxoplasma IgG and IgM antibody testing",
            "Ophthalmologic examination",
            "Clindamycin or trimethoprim-sulfa treatment",
            "Monitor for improvement over 2-4 weeks",
        ),
        icon="fa-eye",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="OTITIS_INTERNA",
        name="Otitis Interna (Inner Ear Infection)",
        priority=14,
        condition=all_of(
            eq("ear_issues", True),
            any_of(eq("head_tilt", True), eq("mobility_status", "wobbly")),
        ),
        urgency=_M,
        description="Deep ear infection affecting the vestibular system and balance",
        clinical_notes=(
            "Extension of middle ear infection to inner ear structures",
            "Affects vestibular system causing balance problems",
            "May be associated with facial nerve paralysis",
            "Requires aggressive systemic antibiotic therapy",
        ),
        next_steps=(
            "Otoscopic examination and ear cytology",
            "Culture and sensitivity testing",
            "Systemic antibiotics (fluoroquinolones)",
            "Consider ear flushing under anesthesia",
        ),
        icon="fa-ear-listen",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="NASOPHARYNGEAL_POLYP",
        name="Nasopharyngeal Polyp",
        priority=15,
        condition=all_of(
            one_of("age_group", "kitten", "adult"),
            eq("ear_issues", True),
            eq("head_tilt", True),
            eq("onset_speed", "gradual"),
        ),
        urgency=_M,
        description="Benign growth in nasopharynx causing ear and vestibular signs",
        clinical_notes=(
            "Inflammatory polyps can extend into middle ear",
            "More common in young cats",
            "Causes progressive vestibular signs",
            "Surgical removal is curative",
        ),
        next_steps=(
            "Otoscopic examination to visualize polyp",
            "CT scan to assess extent",
            "Surgical removal via ventral bulla osteotomy",
            "Post-operative antibiotic therapy",
        ),
        icon="fa-seedling",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="MENINGITIS_ENCEPHALITIS",
        name="Meningitis/Encephalitis",
        priority=16,
        condition=all_of(
            eq("onset_speed", "sudden"),
            eq("pain_signs", True),
            ne("seizures", "none"),
        ),
        urgency=_H,
        description="Inflammation of brain and/or meninges causing pain and seizures",
        clinical_notes=(
            "Combination of neck pain and seizures suggests meningeal irritation",
            "Can be infectious (bacterial, viral) or immune-mediated",
            "Requires aggressive anti-inflammatory treatment",
            "CSF analysis may be diagnostic but risky if increased pressure",
        ),
        next_steps=(
            "High-dose corticosteroids",
            "Broad-spectrum antibiotics pending culture",
            "Seizure control medications",
            "Consider CSF analysis if stable",
        ),
        icon="fa-fire",
        color=_RED,
    ),

    # ── Tier 4: Structural & tumours ─────────────────────────────────────────

    DiagnosticRule(
        id="BRAIN_TUMOR_MENINGIOMA",
        name="Brain Tumor (Meningioma)",
        priority=17,
        condition=all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "gradual"),
            eq("seizures", "mild"),
        ),
        urgency=_H,
        description="Benign brain tumor causing progressive mild neurological signs",
        clinical_notes=(
            "Meningiomas are most common primary brain tumor in cats",
            "Typically cause mild, progressive seizures",
            "Often amenable to surgical resection",
            "Better prognosis than high-grade tumors",
        ),
        next_steps=(
            "MRI with contrast for tumor characterization",
            "Seizure control with anticonvulsants",
            "Surgical consultation for resection",
            "Radiation therapy if surgery not feasible",
        ),
        icon="fa-brain",
        color=_RED,
    ),

    DiagnosticRule(
        id="HIGH_GRADE_BRAIN_TUMOR",
        name="High-Grade Brain Tumor",
        priority=18,
        condition=all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "gradual"),
            eq("seizures", "severe"),
        ),
        urgency=_H,
        description="Aggressive brain tumor causing severe progressive neurological signs",
        clinical_notes=(
            "Severe seizures in seniors suggest high-grade malignancy",
            "May be primary (glioma) or metastatic",
            "Rapid progression and poor prognosis",
            "Palliative care often most appropriate",
        ),
        next_steps=(
            "MRI to characterize tumor",
            "Aggressive seizure control",
            "Palliative corticosteroids",
            "Quality of life assessment and family discussion",
        ),
        icon="fa-skull",
        color=_RED,
    ),

    DiagnosticRule(
        id="SPINAL_TUMOR_LYMPHOMA",
        name="Spinal Tumor (Lymphoma)",
        priority=19,
        condition=all_of(
            eq("age_group", "senior"),
            eq("mobility_status", "paralyzed"),
            eq("onset_speed", "gradual"),
        ),
        urgency=_H,
        description="Spinal lymphoma causing progressive paralysis in senior cats",
        clinical_notes=(
            "Lymphoma is most common spinal tumor in cats",
            "Causes progressive paralysis over weeks to months",
            "Usually not painful until advanced stages",
            "May respond to chemotherapy",
        ),
        next_steps=(
            "Spinal MRI to localize tumor",
            "Biopsy for definitive diagnosis",
            "Chemotherapy protocol if lymphoma confirmed",
            "Radiation therapy for local control",
        ),
        icon="fa-dna",
        color=_RED,
    ),

    DiagnosticRule(
        id="SPINAL_TUMOR_EARLY",
        name="Spinal Tumor (Early Stage)",
        priority=20,
        condition=all_of(
            eq("age_group", "senior"),
            eq("mobility_status", "wobbly"),
            eq("pain_signs", False),
            eq("onset_speed", "gradual"),
        ),
        urgency=_M,
        description="Early-stage spinal tumor causing mild ataxia without pain",
        clinical_notes=(
            "Early spinal tumors cause subtle ataxia before paralysis",
            "Lack of pain helps differentiate from IVDD",
            "Progressive worsening over weeks to months",
            "Earlier intervention may improve outcomes",
        ),
        next_steps=(
            "Spinal MRI for early detection",
            "Neurological monitoring for progression",
            "Consider early intervention if tumor confirmed",
            "Supportive care and mobility assistance",
        ),
        icon="fa-search",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="HYDROCEPHALUS",
        name="Hydrocephalus",
        priority=21,
        condition=all_of(
            eq("age_group", "kitten"),
            eq("head_tilt", True),
            eq("seizures", "mild"),
            eq("onset_speed", "gradual"),
        ),
        urgency=_M,
        description="Abnormal accumulation of cerebrospinal fluid in brain ventricles",
        clinical_notes=(
            "Congenital or acquired CSF accumulation",
            "Causes progressive neurological deterioration",
            "May present with dome-shaped head in severe cases",
            "Requires neurosurgical intervention for treatment",
        ),
        next_steps=(
            "MRI to assess ventricular size and CSF flow",
            "Neurosurgical consultation",
            "Ventriculoperitoneal shunt placement",
            "Long-term monitoring for shunt function",
        ),
        icon="fa-water",
        color=_AMBER,
    ),

    # ── Tier 5: Functional & degenerative ────────────────────────────────────

    DiagnosticRule(
        id="IVDD",
        name="Intervertebral Disc Disease (IVDD)",
        priority=22,
        condition=all_of(
            ne("mobility_status", "normal"),
            eq("pain_signs", True),
            eq("onset_speed", "sudden"),
        ),
        urgency=_H,
        description="Acute disc herniation causing spinal cord compression and pain",
        clinical_notes=(
            "Sudden onset of pain with mobility loss is classic for IVDD",
            "Less common in cats than dogs but can be severe",
            "Thoracolumbar region most commonly affected",
            "Early intervention improves prognosis significantly",
        ),
        next_steps=(
            "Strict cage rest immediately",
            "Pain management with opioids and anti-inflammatories",
            "Neurological examination to grade severity",
            "MRI and surgical consultation if severe",
        ),
        icon="fa-spine",
        color=_RED,
    ),

    DiagnosticRule(
        id="FELINE_HYPERESTHESIA",
        name="Feline Hyperesthesia Syndrome",
        priority=23,
        condition=all_of(
            eq("age_group", "adult"),
            eq("seizures", "mild"),
            eq("pain_signs", True),
        ),
        urgency=_M,
        description="Neurological condition causing rolling skin syndrome and painful episodes",
        clinical_notes=(
            'Also known as "rolling skin syndrome"',
            "Causes episodes of skin twitching and apparent pain",
            "May involve self-mutilation of tail or back",
            "Responds to anticonvulsants and behavioral modification",
        ),
        next_steps=(
            "Rule out dermatological causes",
            "Anticonvulsant therapy (gabapentin)",
            "Environmental enrichment and stress reduction",
            "Behavioral modification techniques",
        ),
        icon="fa-hand-paper",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="IDIOPATHIC_EPILEPSY",
        name="Idiopathic Epilepsy",
        priority=24,
        condition=all_of(
            eq("age_group", "adult"),
            eq("seizures", "severe"),
            eq("mobility_status", "normal"),
        ),
        urgency=_M,
        description="Primary seizure disorder with no identifiable structural cause",
        clinical_notes=(
            "Diagnosis of exclusion after ruling out other causes",
            "Typically presents with generalized tonic-clonic seizures",
            "Normal between seizure episodes",
            "Good long-term prognosis with proper medication",
        ),
        next_steps=(
            "Complete diagnostic workup to rule out other causes",
            "Anticonvulsant therapy (phenobarbital, levetiracetam)",
            "Regular monitoring of drug levels",
            "Seizure diary for frequency tracking",
        ),
        icon="fa-bolt",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="DIABETIC_NEUROPATHY",
        name="Diabetic Neuropathy",
        priority=25,
        condition=all_of(
            eq("age_group", "senior"),
            eq("mobility_status", "wobbly"),
            eq("onset_speed", "gradual"),
        ),
        urgency=_M,
        description="Peripheral nerve damage from uncontrolled diabetes causing plantigrade stance",
        clinical_notes=(
            'Characteristic "flat-footed" walking on hocks',
            "Result of chronic hyperglycemia damaging peripheral nerves",
            "Often first sign of diabetes in cats",
            "Reversible with proper glucose control",
        ),
        next_steps=(
            "Blood glucose and fructosamine testing",
            "Complete urinalysis",
            "Insulin therapy initiation",
            "Regular glucose monitoring and dietary management",
        ),
        icon="fa-syringe",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="CEREBELLAR_HYPOPLASIA",
        name="Cerebellar Hypoplasia",
        priority=26,
        condition=all_of(
            eq("age_group", "kitten"),
            eq("mobility_status", "wobbly"),
            eq("onset_speed", "gradual"),
            eq("seizures", "none"),
        ),
        urgency=_L,
        description="Congenital underdevelopment of cerebellum causing coordination problems",
        clinical_notes=(
            "Caused by in-utero panleukopenia virus infection",
            'Results in characteristic "wobbly" gait',
            "Non-progressive condition - cats can adapt well",
            "No treatment needed, just environmental modifications",
        ),
        next_steps=(
            "MRI to confirm cerebellar underdevelopment",
            "Environmental modifications for safety",
            "No specific treatment required",
            "Good quality of life with proper care",
        ),
        icon="fa-baby",
        color=_GREEN,
    ),

    # ── Tier 6: Exclusion ────────────────────────────────────────────────────

    DiagnosticRule(
        id="ISCHEMIC_STROKE",
        name="Ischemic Stroke",
        priority=27,
        condition=all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "sudden"),
            eq("head_tilt", True),
            eq("ear_issues", False),
        ),
        urgency=_M,
        description="Acute loss of blood flow to brain region causing sudden neurological deficits",
        clinical_notes=(
            "Sudden onset vestibular signs without ear disease",
            "More common in senior cats with underlying disease",
            "May be associated with hypertension or heart disease",
            "Prognosis depends on location and extent of infarct",
        ),
        next_steps=(
            "MRI to identify infarct location",
            "Blood pressure monitoring and control",
            "Supportive care and physical therapy",
            "Investigate underlying cardiovascular disease",
        ),
        icon="fa-heartbeat",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="IDIOPATHIC_VESTIBULAR",
        name="Idiopathic Vestibular Syndrome",
        priority=28,
        condition=all_of(
            eq("onset_speed", "sudden"),
            any_of(eq("head_tilt", True), eq("eye_signs", True)),
            eq("mobility_status", "wobbly"),
        ),
        urgency=_M,
        description='Sudden vestibular dysfunction of unknown cause - feline "vertigo"',
        clinical_notes=(
            "Sudden onset of severe balance problems",
            "Often dramatic presentation but good prognosis",
            "Most cases improve spontaneously over days to weeks",
            "Supportive care is usually sufficient",
        ),
        next_steps=(
            "Supportive care with anti-nausea medication",
            "Protect from falls during recovery",
            "Monitor for improvement over 72 hours",
            "Consider MRI if no improvement",
        ),
        icon="fa-sync",
        color=_AMBER,
    ),

    DiagnosticRule(
        id="COGNITIVE_DYSFUNCTION",
        name="Cognitive Dysfunction Syndrome (Dementia)",
        priority=29,
        condition=all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "gradual"),
            eq("seizures", "none"),
        ),
        urgency=_L,
        description="Age-related cognitive decline similar to Alzheimer's disease in humans",
        clinical_notes=(
            "Progressive behavioral and cognitive changes",
            "Signs include disorientation, altered sleep patterns",
            "Vocalization and house-soiling may occur",
            "Quality of life can be maintained with proper management",
        ),
        next_steps=(
            "Complete geriatric health assessment",
            "Environmental enrichment and routine maintenance",
            "Consider cognitive supplements (SAMe, antioxidants)",
            "Behavioral management strategies",
        ),
        icon="fa-clock",
        color=_GREEN,
    ),

    DiagnosticRule(
        id="UNDETERMINED",
        name="Undetermined Neurological Anomaly",
        priority=30,
        condition=ALWAYS,
        urgency=_M,
        description="Neurological signs present but pattern does not match established diagnostic criteria",
        clinical_notes=(
            "Clinical signs suggest neurological involvement",
            "Pattern does not match common feline neurological conditions",
            "May represent rare condition or atypical presentation",
            "Comprehensive diagnostic workup recommended",
        ),
        next_steps=(
            "Referral to veterinary neurologist strongly recommended",
            "Comprehensive neurological examination",
            "Advanced imaging (MRI/CT) and CSF analysis",
            "Consider rare conditions and atypical presentations",
        ),
        icon="fa-question",
        color=_GREY,
    ),
]


# ── Display metadata ─────────────────────────────────────────────────────────

URGENCY_DISPLAY: Dict[str, Dict[str, str]] = {
    "EMERGENCY": {"color": _RED_DARK, "icon": "fa-exclamation-triangle", "label": "EMERGENCY"},
    "HIGH":      {"color": _RED,      "icon": "fa-exclamation-circle",   "label": "HIGH PRIORITY"},
    "MODERATE":  {"color": _AMBER,    "icon": "fa-info-circle",          "label": "MODERATE PRIORITY"},
    "LOW":       {"color": _GREEN,    "icon": "fa-check-circle",         "label": "LOW PRIORITY"},
}

INPUT_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "age_group": {
        "kitten": "Cats under 1 year of age",
        "adult": "Cats between 1-7 years of age",
        "senior": "Cats over 7 years of age",
    },
    "onset_speed": {
        "sudden": "Signs appeared within hours to days",
        "gradual": "Signs developed over weeks to months",
    },
    "mobility_status": {
        "normal": "Cat walks and moves normally",
        "wobbly": "Unsteady gait, loss of coordination (ataxia)",
        "paralyzed": "Unable to walk, dragging limbs",
    },
    "seizures": {
        "none": "No seizure activity observed",
        "mild": "Focal twitching, fly-biting, tremors, spacing out",
        "severe": "Full body convulsions, paddling, loss of consciousness",
    },
}
